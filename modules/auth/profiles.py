"""
Profile normalization.

Turns the backend user payload into a UserProfile. Each attribute is
resolved through an explicit, ordered list of sources: the server value
first, then what the caller captured locally, then a hardcoded default.
"""

from typing import Optional

from shared.models import SubscriptionTier, UserRole

from .models import ApiUser, OnboardingDraft, UserProfile

PARENT_STARTING_POINTS = 100
EXPERT_STARTING_POINTS = 0


def _parse_role(value: Optional[str]) -> Optional[UserRole]:
    if not value:
        return None
    try:
        return UserRole(value.lower())
    except ValueError:
        return None


def resolve_role(user: ApiUser, selected_role: Optional[UserRole]) -> UserRole:
    """
    Resolve the user's role.

    Precedence: server ``user_type`` -> server ``role`` -> locally selected
    role -> parent. Unrecognised values fall through to the next source.
    """
    for candidate in (_parse_role(user.user_type), _parse_role(user.role), selected_role):
        if candidate is not None:
            return candidate
    return UserRole.PARENT


def resolve_tier(user: ApiUser) -> SubscriptionTier:
    """Server ``subscription_tier`` when recognised, otherwise free."""
    if user.subscription_tier:
        try:
            return SubscriptionTier(user.subscription_tier.lower())
        except ValueError:
            pass
    return SubscriptionTier.FREE


def default_points(role: UserRole) -> int:
    """Starting points for a newly created profile."""
    return PARENT_STARTING_POINTS if role == UserRole.PARENT else EXPERT_STARTING_POINTS


def resolve_points(user: ApiUser, role: UserRole) -> int:
    """Server ``points`` (never negative), otherwise the role default."""
    if user.points is None:
        return default_points(role)
    return max(0, user.points)


def profile_from_api_user(
    user: ApiUser,
    selected_role: Optional[UserRole],
    draft: OnboardingDraft,
) -> UserProfile:
    """
    Build the finalized profile from a verify-code response.

    Args:
        user: User payload returned by the backend
        selected_role: Role picked on the first onboarding step
        draft: Names captured during onboarding

    Returns:
        UserProfile with every gap filled from local state or defaults
    """
    role = resolve_role(user, selected_role)
    parent_name = user.name or draft.parent_name
    # Child names only belong to parent profiles
    child_name = (user.child_name or draft.child_name) if role == UserRole.PARENT else None

    return UserProfile(
        id=str(user.id) if user.id is not None else None,
        name=child_name or parent_name,
        parent_name=parent_name,
        role=role,
        points=resolve_points(user, role),
        subscription_tier=resolve_tier(user),
        email=user.email,
        diagnosis=user.diagnosis,
        severity=user.severity,
        current_therapies=user.current_therapies,
        goals=user.goals,
        gender=user.gender,
        age=user.age,
    )


def build_local_profile(role: UserRole, draft: OnboardingDraft) -> UserProfile:
    """
    Build a draft profile from onboarding input alone.

    Used before the server has confirmed anything, e.g. to preview the
    dashboard while a code is pending.
    """
    child_name = draft.child_name if role == UserRole.PARENT else ""
    return UserProfile(
        name=child_name or draft.parent_name,
        parent_name=draft.parent_name,
        role=role,
        points=default_points(role),
        subscription_tier=SubscriptionTier.FREE,
    )
