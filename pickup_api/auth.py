from flask import Flask, jsonify, current_app
from flask_login import LoginManager, UserMixin

login_manager = LoginManager()


class Requester(UserMixin):
    """Authenticated caller, identified by the email claim the gateway verified."""

    def __init__(self, email: str):
        self.email = email

    def get_id(self):
        return self.email


@login_manager.request_loader
def load_requester_from_claim(req):
    header = current_app.config.get('REQUESTER_CLAIM_HEADER', 'X-Auth-Email')
    email = (req.headers.get(header) or '').strip()
    if not email:
        return None
    return Requester(email)


@login_manager.user_loader
def load_requester(user_id: str):
    # No server-side sessions; identity comes from the claim header on every request
    return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({
        'error': 'Authentication required',
        'code': 'UNAUTHORIZED'
    }), 401


def init_auth(app: Flask):
    login_manager.init_app(app)
