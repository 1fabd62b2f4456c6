from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from translator_client.core.config import Settings
from translator_client.core.errors import AuthError
from translator_client.core.logging import configure_logging

logger = configure_logging()

# هامش قبل انتهاء الرمز حتى لا يُرسل رمز على وشك الانتهاء.
EXPIRY_SKEW = timedelta(seconds=60)


class TokenProvider(Protocol):
    async def acquire(self) -> str: ...


class StaticTokenProvider:
    """مزود رمز ثابت للاستخدام في السكربتات والاختبارات."""

    def __init__(self, token: str) -> None:
        self.token = token

    async def acquire(self) -> str:
        if not self.token:
            raise AuthError("لا توجد جلسة دخول صالحة.")
        return self.token


@dataclass
class CognitoSession:
    login_id: str
    id_token: str
    refresh_token: str
    expires_at: datetime

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now + EXPIRY_SKEW < self.expires_at


class CognitoTokenProvider:
    """جلب رمز الهوية من Cognito عند الطلب، مع تجديده عبر رمز التحديث عند انتهائه."""

    def __init__(self, settings: Settings, client: Any = None) -> None:
        self.client_id = settings.user_pool_client_id
        self.client = client or boto3.client("cognito-idp", region_name=settings.region)
        self._session: Optional[CognitoSession] = None

    @property
    def login_id(self) -> Optional[str]:
        return self._session.login_id if self._session else None

    @property
    def signed_in(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------------
    async def sign_in(self, username: str, password: str) -> None:
        result = await self._initiate_auth(
            "USER_PASSWORD_AUTH",
            {"USERNAME": username, "PASSWORD": password},
        )
        refresh_token = result.get("RefreshToken")
        if not refresh_token:
            raise AuthError("لم يُرجع مزود الهوية رمز تحديث.")
        self._session = self._build_session(username, result, refresh_token)
        logger.info("تم تسجيل الدخول للمستخدم %s.", username)

    def sign_out(self) -> None:
        if self._session:
            logger.info("تسجيل خروج المستخدم %s.", self._session.login_id)
        self._session = None

    async def acquire(self) -> str:
        session = self._session
        if session is None:
            raise AuthError("لا توجد جلسة دخول صالحة.")
        if session.is_fresh():
            return session.id_token

        logger.info("انتهت صلاحية رمز الهوية، جاري التجديد.")
        result = await self._initiate_auth("REFRESH_TOKEN_AUTH", {"REFRESH_TOKEN": session.refresh_token})
        # قد تكون الجلسة قد أُغلقت أثناء انتظار التجديد.
        if self._session is not session:
            raise AuthError("أُغلقت الجلسة أثناء تجديد الرمز.")
        self._session = self._build_session(session.login_id, result, session.refresh_token)
        return self._session.id_token

    # ------------------------------------------------------------------
    async def _initiate_auth(self, flow: str, parameters: dict[str, str]) -> dict:
        try:
            response = await asyncio.to_thread(
                self.client.initiate_auth,
                AuthFlow=flow,
                ClientId=self.client_id,
                AuthParameters=parameters,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.warning("فشل التواصل مع مزود الهوية (%s): %s", flow, exc)
            raise AuthError("فشل التحقق من الهوية.") from exc

        result = response.get("AuthenticationResult") or {}
        if not result.get("IdToken"):
            raise AuthError("لم يُرجع مزود الهوية رمز هوية صالحًا.")
        return result

    @staticmethod
    def _build_session(login_id: str, result: dict, refresh_token: str) -> CognitoSession:
        expires_in = int(result.get("ExpiresIn") or 3600)
        return CognitoSession(
            login_id=login_id,
            id_token=result["IdToken"],
            refresh_token=refresh_token,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )
