"""
Unit tests for permission checkers, the message catalogue and item granters.
"""

import pytest

from claimrewards.modules.rewards.granter import (
    REWARD_GRANTED_EVENT,
    DispatchItemGranter,
    ItemGranter,
    RecordingItemGranter,
)
from claimrewards.modules.rewards.messages import DEFAULT_MESSAGES, Messages
from claimrewards.modules.rewards.models import ClaimOutcome
from claimrewards.modules.rewards.permissions import (
    CLAIM_PERMISSION,
    PermissionChecker,
    PermissionRegistry,
    RolePermissionChecker,
)
from tests.conftest import P1, P2

pytestmark = pytest.mark.unit


class TestPermissionRegistry:
    """In-process permission registry."""

    def test_granted_player_has_permission(self, permission_registry):
        assert permission_registry.user_has_permission(P1, CLAIM_PERMISSION)

    def test_ungranted_player_lacks_permission(self, permission_registry):
        assert not permission_registry.user_has_permission("someone-else", CLAIM_PERMISSION)

    def test_unregistered_permission_is_never_held(self):
        registry = PermissionRegistry()

        assert not registry.user_has_permission(P1, CLAIM_PERMISSION)
        with pytest.raises(KeyError):
            registry.grant(P1, CLAIM_PERMISSION)

    def test_revoke_removes_grant(self, permission_registry):
        permission_registry.revoke(P1, CLAIM_PERMISSION)

        assert not permission_registry.user_has_permission(P1, CLAIM_PERMISSION)
        assert permission_registry.user_has_permission(P2, CLAIM_PERMISSION)

    def test_satisfies_checker_protocol(self, permission_registry):
        assert isinstance(permission_registry, PermissionChecker)


class TestRolePermissionChecker:
    """Discord role gate."""

    def _member(self, mocker, *role_names):
        member = mocker.MagicMock()
        member.id = int(P1)
        roles = []
        for name in role_names:
            role = mocker.MagicMock()
            role.name = name
            roles.append(role)
        member.roles = roles
        return member

    def test_no_role_configured_allows_everyone(self, mocker):
        checker = RolePermissionChecker.for_member(self._member(mocker))

        assert checker.user_has_permission(P1, CLAIM_PERMISSION)

    def test_member_with_role_is_allowed(self, mocker):
        member = self._member(mocker, "Members", "Claimers")

        checker = RolePermissionChecker.for_member(member, "Claimers")

        assert checker.user_has_permission(P1, CLAIM_PERMISSION)

    def test_member_without_role_is_denied(self, mocker):
        checker = RolePermissionChecker.for_member(self._member(mocker, "Members"), "Claimers")

        assert not checker.user_has_permission(P1, CLAIM_PERMISSION)

    def test_direct_message_user_without_roles_is_denied(self, mocker):
        user = mocker.MagicMock(spec=["id"])
        user.id = int(P1)

        checker = RolePermissionChecker.for_member(user, "Claimers")

        assert not checker.user_has_permission(P1, CLAIM_PERMISSION)

    def test_only_answers_for_its_member_and_permission(self, mocker):
        checker = RolePermissionChecker.for_member(self._member(mocker))

        assert not checker.user_has_permission(P2, CLAIM_PERMISSION)
        assert not checker.user_has_permission(P1, "other.permission")


class TestMessages:
    """Player-facing messages."""

    def test_claim_success_is_formatted(self):
        assert Messages().get("ClaimSuccess", 50, "blood") == "You have claimed 50 blood."

    def test_defaults(self):
        messages = Messages()

        assert messages.get("NothingToClaim") == "Nothing to claim."
        assert messages.get("NoPermission") == "You do not have permission to use this command."

    def test_unknown_key_returns_key(self):
        assert Messages().get("SomethingElse") == "SomethingElse"

    def test_overrides_replace_defaults_only_where_given(self):
        messages = Messages({"NothingToClaim": "Rien à réclamer."})

        assert messages.get("NothingToClaim") == "Rien à réclamer."
        assert messages.get("NoPermission") == DEFAULT_MESSAGES["NoPermission"]

    def test_for_outcome(self):
        messages = Messages()

        assert messages.for_outcome(ClaimOutcome.claimed(10, "scrap")) == "You have claimed 10 scrap."
        assert messages.for_outcome(ClaimOutcome.nothing_to_claim()) == "Nothing to claim."


class TestItemGranters:
    def test_dispatch_granter_fires_bot_event(self, mock_bot):
        granter = DispatchItemGranter(mock_bot)

        assert granter.give_item(P1, "blood", 50, 0) is True
        mock_bot.dispatch.assert_called_once_with(REWARD_GRANTED_EVENT, P1, "blood", 50, 0)

    def test_recording_granter_keeps_grants(self):
        granter = RecordingItemGranter(succeed=False)

        assert granter.give_item(P1, "blood", 5, 3) is False
        assert granter.grants[0].skin_id == 3
        assert isinstance(granter, ItemGranter)
