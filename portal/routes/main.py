"""Main routes - client portal pages, feedback, language switching."""
from flask import Blueprint, current_app, flash, g, make_response, redirect, render_template, request
from flask_babel import gettext as _, lazy_gettext as _l

from portal.errors import BackendError, ValidationError
from portal.models import FEEDBACK_KINDS
from portal.routes.auth import client_required
from portal.services.content import (
    BANNER_LIMIT, get_calendar_url, list_announcements, list_upcoming_events,
)
from portal.services.feedback import build_mailto_link, submit_feedback
from portal.services.notifier import FeedbackNotifier

main_bp = Blueprint('main', __name__)

QUICK_LINKS = [
    {
        'title': 'TOTVS Fluig Academy',
        'description': _l('Cursos e treinamentos oficiais'),
        'href': 'https://academy.fluig.com/',
    },
    {
        'title': 'Fórum Fluig Oficial',
        'description': _l('Comunidade e discussões'),
        'href': 'https://forum.totvs.io/',
    },
    {
        'title': 'Documentação TDN',
        'description': _l('Documentação técnica oficial'),
        'href': 'https://tdn.totvs.com/pages/releaseview.action?pageId=234457027',
    },
    {
        'title': 'Central de FAQs',
        'description': _l('Base de conhecimento Fluig'),
        'href': 'https://centraldeatendimento.totvs.com/hc/pt-br/sections/27653283587223-TOTVS-Fluig-Plataforma',
    },
]


@main_bp.route('/portal')
@client_required
def portal_home():
    return render_template(
        'portal/home.html',
        announcements=list_announcements(g.gateway, limit=BANNER_LIMIT),
        events=list_upcoming_events(g.gateway),
        calendar_url=get_calendar_url(g.gateway),
        quick_links=QUICK_LINKS,
    )


@main_bp.route('/portal/announcements')
@client_required
def announcements():
    return render_template('portal/announcements.html', announcements=list_announcements(g.gateway))


@main_bp.route('/portal/feedback', methods=['GET', 'POST'])
@client_required
def feedback():
    t_code = g.auth.state.client_code
    form = {'kind': 'compliment', 'subject': '', 'message': '', 'contact_email': ''}
    mailto = None

    if request.method == 'POST':
        form = {key: request.form.get(key, default) for key, default in form.items()}
        if form['kind'] not in FEEDBACK_KINDS:
            form['kind'] = 'compliment'
        try:
            receipt = submit_feedback(
                g.gateway,
                FeedbackNotifier.from_config(current_app.config),
                t_code=t_code,
                kind=form['kind'],
                message=form['message'],
                subject=form['subject'],
                contact_email=form['contact_email'],
            )
        except ValidationError:
            flash(_('Escreva sua mensagem antes de enviar.'), 'error')
        except BackendError:
            flash(_('Não foi possível enviar agora. Tente novamente.'), 'error')
        else:
            flash(_('Feedback enviado com sucesso!'), 'success')
            if not receipt.notification.delivered:
                flash(_('Mensagem registrada. O envio de e-mail pode depender de configuração.'), 'info')
                mailto = build_mailto_link(
                    current_app.config['FEEDBACK_RECIPIENT'],
                    t_code,
                    receipt.feedback.kind,
                    receipt.feedback.message,
                    subject=receipt.feedback.subject,
                )
            form = {'kind': 'compliment', 'subject': '', 'message': '', 'contact_email': ''}

    return render_template('portal/feedback.html', form=form, t_code=t_code, mailto=mailto)


@main_bp.route('/set_language/<lang>')
def set_language(lang):
    if lang not in current_app.config['SUPPORTED_LOCALES']:
        lang = current_app.config['BABEL_DEFAULT_LOCALE']
    resp = make_response(redirect(request.referrer or '/'))
    resp.set_cookie('babel_translation', lang)
    return resp
