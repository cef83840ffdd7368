"""
Login state machine.

Drives onboarding from role selection to a verified session:

    parent: ROLE_SELECTION -> NAME -> CHILD_NAME -> PHONE -> CODE -> COMPLETE
    expert: ROLE_SELECTION -> NAME -> PHONE -> CODE -> COMPLETE

Forward moves are gated by the current step's validation predicate. The
PHONE step continues by sending a verification code and the CODE step by
verifying it; both stay on their step and expose ``error_message`` when the
backend call fails. Only one call is in flight at a time.
"""

import inspect
import logging
import math
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from shared.exceptions import HeartBridgeError
from shared.models import UserRole

from .exceptions import FlowStateError, InvalidRoleError, ResendCooldownError
from .interfaces import IAuthService, ITokenStore
from .models import (
    CODE_DIGITS,
    PHONE_DIGITS,
    OnboardingDraft,
    StartLoginRequest,
    StartLoginResponse,
    UserProfile,
    VerifyCodeRequest,
    format_phone_number,
)
from .profiles import build_local_profile, profile_from_api_user

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
DEFAULT_RESEND_COOLDOWN_SECONDS = 30.0


class LoginStep(str, Enum):
    ROLE_SELECTION = "role_selection"
    NAME = "name"
    CHILD_NAME = "child_name"
    PHONE = "phone"
    CODE = "code"
    COMPLETE = "complete"


STEP_SEQUENCES: dict[UserRole, tuple[LoginStep, ...]] = {
    UserRole.PARENT: (
        LoginStep.ROLE_SELECTION,
        LoginStep.NAME,
        LoginStep.CHILD_NAME,
        LoginStep.PHONE,
        LoginStep.CODE,
        LoginStep.COMPLETE,
    ),
    UserRole.EXPERT: (
        LoginStep.ROLE_SELECTION,
        LoginStep.NAME,
        LoginStep.PHONE,
        LoginStep.CODE,
        LoginStep.COMPLETE,
    ),
}

OnComplete = Callable[[UserProfile], Union[None, Awaitable[None]]]


class LoginFlow:
    """
    Multi-step onboarding and phone verification.

    Collaborators are injected so the flow can run against fakes. The
    optional ``on_complete`` callback (sync or async) receives the
    normalized profile once the token has been stored.
    """

    def __init__(
        self,
        auth_service: IAuthService,
        token_store: ITokenStore,
        on_complete: Optional[OnComplete] = None,
        resend_cooldown: float = DEFAULT_RESEND_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._auth = auth_service
        self._token_store = token_store
        self._on_complete = on_complete
        self._resend_cooldown = resend_cooldown
        self._clock = clock
        self._last_code_sent_at: Optional[float] = None

        self.step = LoginStep.ROLE_SELECTION
        self.role: Optional[UserRole] = None
        self.draft = OnboardingDraft()
        self.error_message: Optional[str] = None
        self.is_loading = False
        self.profile: Optional[UserProfile] = None
        self.last_start_response: Optional[StartLoginResponse] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> tuple[LoginStep, ...]:
        """The step sequence for the selected role."""
        if self.role is None:
            return (LoginStep.ROLE_SELECTION,)
        return STEP_SEQUENCES[self.role]

    @property
    def step_number(self) -> int:
        """Index of the current step; 0 is role selection."""
        return self.steps.index(self.step)

    @property
    def total_steps(self) -> int:
        """Number of input steps after role selection (parent 4, expert 3)."""
        return max(0, len(self.steps) - 2)

    @property
    def is_complete(self) -> bool:
        return self.step == LoginStep.COMPLETE

    @property
    def formatted_phone(self) -> str:
        return format_phone_number(self.draft.phone)

    @property
    def draft_profile(self) -> Optional[UserProfile]:
        """Profile built from local input only, before verification."""
        if self.role is None:
            return None
        return build_local_profile(self.role, self.draft)

    def is_step_valid(self) -> bool:
        """Whether the current step's input allows moving forward."""
        if self.step == LoginStep.ROLE_SELECTION:
            return self.role is not None
        if self.step == LoginStep.NAME:
            return len(self.draft.parent_name.strip()) >= MIN_NAME_LENGTH
        if self.step == LoginStep.CHILD_NAME:
            return len(self.draft.child_name.strip()) >= MIN_NAME_LENGTH
        if self.step == LoginStep.PHONE:
            return len(self.draft.phone) >= PHONE_DIGITS
        if self.step == LoginStep.CODE:
            return len(self.draft.code) == CODE_DIGITS
        return False

    def seconds_until_resend(self) -> float:
        """Remaining cooldown before another code may be requested."""
        if self._last_code_sent_at is None:
            return 0.0
        elapsed = self._clock() - self._last_code_sent_at
        return max(0.0, self._resend_cooldown - elapsed)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def select_role(self, role: Union[UserRole, str]) -> None:
        """Pick a role on the first step and move to the name step."""
        if self.step != LoginStep.ROLE_SELECTION:
            raise FlowStateError("select a role", self.step.value)
        try:
            self.role = UserRole(role)
        except ValueError:
            raise InvalidRoleError(str(role))
        self.error_message = None
        self.step = LoginStep.NAME

    def enter_name(self, value: str) -> None:
        self.draft.parent_name = value

    def enter_child_name(self, value: str) -> None:
        self.draft.child_name = value

    def enter_phone(self, value: str) -> None:
        self.draft.set_phone(value)

    def enter_code(self, value: str) -> None:
        self.draft.set_code(value)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def advance(self) -> bool:
        """
        Continue from the current step.

        Returns:
            True if the flow moved forward. Invalid input or a call already
            in flight returns False without touching state.
        """
        if self.is_loading or not self.is_step_valid():
            return False
        if self.step == LoginStep.PHONE:
            return await self.send_code()
        if self.step == LoginStep.CODE:
            return await self.verify_code()

        self._move_forward()
        self.error_message = None
        return True

    def back(self) -> bool:
        """Go to the previous step. Not possible from the first or last step."""
        if self.step in (LoginStep.ROLE_SELECTION, LoginStep.COMPLETE):
            return False
        self.step = self.steps[self.step_number - 1]
        self.error_message = None
        return True

    def reset(self) -> None:
        """
        Start over from role selection with an empty draft.

        The code-send cooldown is kept; starting over does not allow an
        immediate new code.
        """
        self.step = LoginStep.ROLE_SELECTION
        self.role = None
        self.draft = OnboardingDraft()
        self.error_message = None
        self.profile = None
        self.last_start_response = None

    async def send_code(self) -> bool:
        """
        Request a verification code from the PHONE step.

        Moves to CODE on success; stays on PHONE with ``error_message``
        set on failure. Going back from CODE and continuing again is held
        to the same cooldown as ``resend_code``.
        """
        if self.step != LoginStep.PHONE:
            raise FlowStateError("send a code", self.step.value)
        if self.is_loading or not self.is_step_valid():
            return False
        return await self._run(self._send_code)

    async def resend_code(self) -> bool:
        """
        Request another code from the CODE step.

        Refused with a message until the resend cooldown has elapsed.
        """
        if self.step != LoginStep.CODE:
            raise FlowStateError("resend a code", self.step.value)
        if self.is_loading:
            return False
        return await self._run(self._resend_code)

    async def verify_code(self) -> bool:
        """
        Verify the entered code from the CODE step.

        On success the token is stored, the profile normalized, the flow
        moves to COMPLETE and ``on_complete`` is invoked. On failure the
        flow stays on CODE with ``error_message`` set and nothing is saved.
        """
        if self.step != LoginStep.CODE:
            raise FlowStateError("verify a code", self.step.value)
        if self.is_loading or not self.is_step_valid():
            return False
        return await self._run(self._verify_code)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _run(self, action: Callable[[], Awaitable[bool]]) -> bool:
        """Run one backend-calling action, converting errors to a message."""
        self.error_message = None
        self.is_loading = True
        try:
            return await action()
        except HeartBridgeError as e:
            logger.warning(f"Login step {self.step.value} failed: {e.code}")
            self.error_message = e.message
            return False
        finally:
            self.is_loading = False

    async def _request_code(self) -> StartLoginResponse:
        remaining = self.seconds_until_resend()
        if remaining > 0:
            raise ResendCooldownError(math.ceil(remaining))

        request = StartLoginRequest(
            user_type=self.role,
            name=self.draft.parent_name,
            child_name=self.draft.child_name if self.role == UserRole.PARENT else None,
            phone=self.draft.phone,
        )
        response = await self._auth.start_login(request)
        self._last_code_sent_at = self._clock()
        self.last_start_response = response
        return response

    async def _send_code(self) -> bool:
        origin = self.step
        await self._request_code()
        if self.step != origin:
            logger.debug("Ignoring start-login result, user navigated away")
            return False
        self._move_forward()
        return True

    async def _resend_code(self) -> bool:
        await self._request_code()
        return True

    async def _verify_code(self) -> bool:
        origin = self.step
        response = await self._auth.verify_code(
            VerifyCodeRequest(phone=self.draft.phone, code=self.draft.code)
        )
        if self.step != origin:
            logger.debug("Ignoring verify-code result, user navigated away")
            return False

        # Token first: the flow cannot complete without a stored credential
        self._token_store.save_token(response.token)
        profile = profile_from_api_user(response.user, self.role, self.draft)

        if self._on_complete is not None:
            result = self._on_complete(profile)
            if inspect.isawaitable(result):
                await result

        self.profile = profile
        self.step = LoginStep.COMPLETE
        self.draft = OnboardingDraft()
        logger.info(f"Login complete for {profile.role.value}")
        return True

    def _move_forward(self) -> None:
        self.step = self.steps[self.step_number + 1]
