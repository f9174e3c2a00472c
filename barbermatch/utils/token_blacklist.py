from datetime import datetime, timezone
from typing import Optional, Tuple
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from barbermatch.models.token_blacklist import TokenBlacklist
from barbermatch.logger import get_logger

logger = get_logger(__name__)


def _claims(token: str) -> Tuple[Optional[str], Optional[datetime]]:
    """jti and expiry of a token we issued; the signature was checked on the way in"""
    try:
        payload = jwt.get_unverified_claims(token)
    except JWTError:
        return None, None
    exp = payload.get("exp")
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
    return payload.get("jti"), expires_at


class TokenBlacklistService:
    @staticmethod
    def revoke(db: Session, *tokens: Optional[str]) -> int:
        """Blacklist every given token in one commit and return how many were added.

        Entries whose token has expired anyway are pruned in the same commit.
        """
        now = datetime.now(timezone.utc)
        added = 0
        try:
            db.query(TokenBlacklist).filter(TokenBlacklist.expires_at <= now).delete()
            for token in filter(None, tokens):
                jti, expires_at = _claims(token)
                if not jti or not expires_at:
                    logger.warning("Token without jti/exp cannot be revoked")
                    continue
                if db.query(TokenBlacklist).filter(TokenBlacklist.jti == jti).first():
                    continue
                db.add(TokenBlacklist(jti=jti, token=token, expires_at=expires_at))
                added += 1
            db.commit()

        except Exception as e:
            db.rollback()
            logger.error(f"Error revoking tokens: {str(e)}")
            raise

        logger.info(f"Revoked {added} token(s)")
        return added

    @staticmethod
    def is_token_blacklisted(db: Session, jti: str) -> bool:
        return db.query(TokenBlacklist).filter(
            TokenBlacklist.jti == jti,
            TokenBlacklist.expires_at > datetime.now(timezone.utc),
        ).first() is not None


token_blacklist_service = TokenBlacklistService()
