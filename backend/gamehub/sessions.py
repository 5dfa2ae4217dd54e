"""Server-side session store backed by the ``sessions`` table.

The cookie only carries a signed, opaque session id; the payload (including
the Flask-Login user id) lives in :class:`~gamehub.models.LoginSession`.
"""
import json
import secrets

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from gamehub import db
from gamehub.models import LoginSession, utcnow


class DatabaseSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False


class DatabaseSessionInterface(SessionInterface):
    session_class = DatabaseSession
    salt = 'gamehub-session'

    def _signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    def _new_session(self):
        return self.session_class(sid=secrets.token_urlsafe(32), new=True)

    def open_session(self, app, request):
        signer = self._signer(app)
        if signer is None:
            return None
        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self._new_session()
        try:
            sid = signer.unsign(cookie).decode('utf-8')
        except BadSignature:
            return self._new_session()

        row = db.session.get(LoginSession, sid)
        if row is None:
            return self._new_session()
        if row.is_expired():
            db.session.delete(row)
            db.session.commit()
            return self._new_session()
        try:
            data = json.loads(row.data or '{}')
        except ValueError:
            data = {}
        return self.session_class(data, sid=sid)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if not session:
            if session.modified:
                row = db.session.get(LoginSession, session.sid)
                if row is not None:
                    db.session.delete(row)
                    db.session.commit()
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not self.should_set_cookie(app, session):
            return

        expires_at = utcnow() + app.permanent_session_lifetime
        row = db.session.get(LoginSession, session.sid)
        if row is None:
            row = LoginSession(id=session.sid)
        row.data = json.dumps(dict(session))
        user_id = session.get('_user_id')
        row.user_id = int(user_id) if user_id else None
        row.expires_at = expires_at
        db.session.add(row)
        db.session.commit()

        response.set_cookie(
            name,
            self._signer(app).sign(session.sid).decode('utf-8'),
            expires=self.get_expiration_time(app, session),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )

    def regenerate(self, session):
        """Drop the stored row and give ``session`` a fresh id (used at login)."""
        row = db.session.get(LoginSession, session.sid)
        if row is not None:
            db.session.delete(row)
        session.sid = secrets.token_urlsafe(32)
        session.new = True
        session.modified = True


def purge_expired_sessions(now=None):
    """Delete every expired session row and return how many were removed."""
    count = LoginSession.query.filter(LoginSession.expires_at <= (now or utcnow())).delete()
    db.session.commit()
    return count
