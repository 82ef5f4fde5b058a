from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime, timedelta
import logging

from ..models.user import User, RefreshToken
from ..models.patient import Patient
from ..core.security import (
    verify_password, get_password_hash, create_token_pair,
    verify_token, hash_token, UserRole
)
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, email: str, password: str, role: UserRole) -> User:
        """Add a user to the session; the caller commits."""
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=True
        )
        self.db.add(user)
        self.db.flush()
        return user

    def ensure_admin(self, email: str, password: str) -> User:
        """Create the bootstrap admin account unless it already exists."""
        user = self.db.query(User).filter(User.email == email).first()
        if user:
            return user

        user = self.create_user(email, password, UserRole.ADMIN)
        self.db.commit()
        logger.info(f"Created admin account {email}")
        return user

    def register_patient(self, user_data: UserRegister) -> Patient:
        """Register a new patient account together with its profile."""
        user = self.create_user(user_data.email, user_data.password, UserRole.PATIENT)

        patient = Patient(
            user_id=user.id,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            date_of_birth=user_data.date_of_birth,
            gender=user_data.gender,
            phone_number=user_data.phone_number,
            address=user_data.address
        )
        self.db.add(patient)
        self.db.commit()
        self.db.refresh(patient)

        logger.info(f"Registered patient {patient.id} for user {user.id}")
        return patient

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return tokens."""
        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login for {login_data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated"
            )

        user.last_login = datetime.utcnow()
        return self._issue_tokens(user)

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Rotate a refresh token into a new token pair."""
        token_payload = verify_token(refresh_token)
        if not token_payload or token_payload.token_type != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token"
            )

        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > datetime.utcnow()
        ).first()

        if not stored_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token"
            )

        user = self.db.query(User).filter(User.id == token_payload.sub).first()
        if not user or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found or inactive"
            )

        return self._issue_tokens(user)

    def logout_user(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Unknown tokens are ignored."""
        revoked = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token)
        ).update({"is_revoked": True})
        self.db.commit()
        return revoked > 0

    def _issue_tokens(self, user: User) -> TokenResponse:
        tokens = create_token_pair(user.id, user.email, user.role)
        self._store_refresh_token(user.id, tokens.refresh_token)
        self.db.commit()
        self.db.refresh(user)

        return TokenResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            user=UserResponse.model_validate(user)
        )

    def _store_refresh_token(self, user_id: int, refresh_token: str):
        """Store refresh token, revoking the user's previous ones."""
        token_payload = verify_token(refresh_token)
        if token_payload and token_payload.exp:
            expires_at = datetime.utcfromtimestamp(token_payload.exp)
        else:
            expires_at = datetime.utcnow() + timedelta(days=7)

        self.db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id
        ).update({"is_revoked": True})

        self.db.add(RefreshToken(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            expires_at=expires_at
        ))
