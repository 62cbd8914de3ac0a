"""Admin routes - console dashboard and CRUD over portal content."""
import logging

from flask import Blueprint, abort, current_app, flash, g, redirect, render_template, request, url_for
from flask_babel import gettext as _

from portal.errors import BackendError, NotFound, UnsupportedOperation, ValidationError
from portal.routes.auth import admin_required
from portal.services.admin import AdminView, load_dashboard

admin_bp = Blueprint('admin', __name__)
logger = logging.getLogger(__name__)

DELETE_PROMPTS = {
    AdminView.CODES: 'Tem certeza que deseja remover este código?',
    AdminView.ANNOUNCEMENTS: 'Tem certeza que deseja remover este comunicado?',
    AdminView.EVENTS: 'Tem certeza que deseja remover este evento?',
    AdminView.FEEDBACK: 'Tem certeza que deseja remover este feedback?',
}


def _resolve_view(name, crud=True):
    try:
        view = AdminView(name)
    except ValueError:
        abort(404)
    if crud and not view.is_crud:
        abort(404)
    return view


def _controller(view):
    return view.controller(g.gateway, current_app.config['PORTAL_TIMEZONE'])


def _back_to(view):
    return redirect(url_for('admin.dashboard', tab=view.value))


def _run_mutation(view, action, success_message):
    """Run one controller mutation and flash the outcome."""
    try:
        action()
    except ValidationError as exc:
        logger.info('Admin %s input rejected: %s', view.value, exc)
        flash(_('Preencha os campos obrigatórios corretamente.'), 'error')
    except NotFound:
        abort(404)
    except UnsupportedOperation:
        abort(405)
    except BackendError:
        flash(_('Não foi possível salvar agora. Tente novamente.'), 'error')
    else:
        flash(success_message, 'success')
    return _back_to(view)


# ==================== DASHBOARD ====================

@admin_bp.route('/admin')
def dashboard():
    if not g.auth.state.admin_authenticated:
        return render_template('admin/login.html')

    active = _resolve_view(request.args.get('tab', AdminView.CODES.value), crud=False)
    data = load_dashboard(g.gateway, current_app.config['PORTAL_TIMEZONE'])

    editing = None
    edit_id = request.args.get('edit', type=int)
    if edit_id is not None and active.is_crud:
        editing = next((row for row in data[active] if row.id == edit_id), None)

    return render_template(
        'admin/dashboard.html',
        views=list(AdminView),
        active=active,
        data=data,
        editing=editing,
        admin_user=g.auth.state.admin_user,
    )


# ==================== CRUD ====================

@admin_bp.route('/admin/<view_name>/create', methods=['POST'])
@admin_required
def create(view_name):
    view = _resolve_view(view_name)
    return _run_mutation(view, lambda: _controller(view).create(request.form), _('Registro criado.'))


@admin_bp.route('/admin/<view_name>/<int:record_id>/update', methods=['POST'])
@admin_required
def update(view_name, record_id):
    view = _resolve_view(view_name)
    return _run_mutation(view, lambda: _controller(view).update(record_id, request.form), _('Registro atualizado.'))


@admin_bp.route('/admin/<view_name>/<int:record_id>/toggle', methods=['POST'])
@admin_required
def toggle(view_name, record_id):
    view = _resolve_view(view_name)
    return _run_mutation(view, lambda: _controller(view).toggle_active(record_id), _('Status atualizado.'))


@admin_bp.route('/admin/<view_name>/<int:record_id>/delete', methods=['GET', 'POST'])
@admin_required
def delete(view_name, record_id):
    view = _resolve_view(view_name)
    controller = _controller(view)

    if request.method == 'POST' and request.form.get('confirm') == 'yes':
        return _run_mutation(view, lambda: controller.delete(record_id), _('Registro removido.'))

    try:
        record = controller.get(record_id)
    except NotFound:
        abort(404)
    except BackendError:
        flash(_('Não foi possível carregar o registro. Tente novamente.'), 'error')
        return _back_to(view)
    return render_template(
        'admin/confirm_delete.html',
        view=view,
        record=record,
        prompt=_(DELETE_PROMPTS[view]),
    )


# ==================== SETTINGS ====================

@admin_bp.route('/admin/settings', methods=['POST'])
@admin_required
def save_settings():
    view = AdminView.SETTINGS
    return _run_mutation(
        view,
        lambda: _controller(view).save(request.form.get('google_calendar_id', '')),
        _('ID da agenda atualizado com sucesso!'),
    )
