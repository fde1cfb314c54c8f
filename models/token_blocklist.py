"""Revoked JWT identifiers."""

from . import db, utcnow


class TokenBlocklist(db.Model):
    """A token id that must no longer be accepted, even before it expires."""

    __tablename__ = "token_blocklist"

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), unique=True, nullable=False, index=True)
    # Not a foreign key: revocations outlive deleted accounts.
    user_id = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @classmethod
    def revoke(cls, jti: str, user_id: int | None = None) -> None:
        """Add a token id to the blocklist. The caller commits."""

        if cls.is_revoked(jti):
            return
        db.session.add(cls(jti=jti, user_id=user_id))

    @classmethod
    def is_revoked(cls, jti: str) -> bool:
        return db.session.query(cls.id).filter_by(jti=jti).first() is not None
