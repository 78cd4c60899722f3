"""
Tests for ContainerResolver.

Covers the single-candidate shortcut, the matcher chain scenarios,
disabled kinds, unmatched kinds and the no-double-assignment guarantee.
"""

import itertools

import pytest
from pydantic import ValidationError

from container_monitor.models import ContainerKind, ResolvedAssignment
from container_monitor.services.resolver import ContainerResolver, VolumeMatcher

from factories import make_volume, office_policy, profile_policy


@pytest.fixture
def resolver():
    return ContainerResolver()


class TestShortcutAndEmptyInputs:
    def test_single_candidate_single_kind(self, resolver):
        """Profile enabled, ODFC disabled, one volume: assigned without size check."""
        volume = make_volume("vol-1", total_mb=30000)

        result = resolver.resolve([volume], profile_policy(max_size_mb=30720), office_policy(enabled=False))

        assert result.get(ContainerKind.PROFILE) == volume
        assert result.get(ContainerKind.OFFICE_DATA) is None

    def test_shortcut_ignores_size(self, resolver):
        volume = make_volume("vol-1", total_mb=1024)

        result = resolver.resolve([volume], profile_policy(enabled=False), office_policy(max_size_mb=51200))

        assert result.get(ContainerKind.OFFICE_DATA) == volume

    def test_no_volumes(self, resolver):
        result = resolver.resolve([], profile_policy(), office_policy())
        assert result.assignments == {}

    @pytest.mark.parametrize("count", [0, 1, 2, 5])
    def test_both_disabled_assigns_nothing(self, resolver, count):
        volumes = [make_volume(f"vol-{i}", total_mb=30720) for i in range(count)]

        result = resolver.resolve(volumes, profile_policy(enabled=False), office_policy(enabled=False))

        assert result.assignments == {}


class TestSizeRatio:
    def test_limits_differ_scenario(self, resolver):
        volumes = [make_volume("vol-0", 30500), make_volume("vol-1", 10300)]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=30720), office_policy(max_size_mb=10240))

        assert result.get(ContainerKind.PROFILE).id == "vol-0"
        assert result.get(ContainerKind.OFFICE_DATA).id == "vol-1"

    def test_order_does_not_matter_for_size_signal(self, resolver):
        volumes = [make_volume("odfc", 10300), make_volume("profile", 30500)]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=30720), office_policy(max_size_mb=10240))

        assert result.get(ContainerKind.PROFILE).id == "profile"
        assert result.get(ContainerKind.OFFICE_DATA).id == "odfc"

    def test_second_volume_falls_to_remaining_kind(self, resolver):
        """Once Profile is taken, the next volume can only go to ODFC."""
        volumes = [make_volume("a", 30500), make_volume("b", 29000)]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=30720), office_policy(max_size_mb=10240))

        assert result.get(ContainerKind.PROFILE).id == "a"
        assert result.get(ContainerKind.OFFICE_DATA).id == "b"

    def test_extra_volumes_ignored_once_complete(self, resolver):
        volumes = [make_volume("a", 30500), make_volume("b", 10300), make_volume("c", 30700)]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=30720), office_policy(max_size_mb=10240))

        assert {v.id for v in result.assignments.values()} == {"a", "b"}


class TestEqualLimits:
    def test_label_and_positional_scenario(self, resolver):
        """Unlabeled volume goes to Profile positionally, O365-labeled one to ODFC."""
        volumes = [make_volume("vol-0", 20480, label=""), make_volume("vol-1", 20480, label="O365Cache")]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=20480), office_policy(max_size_mb=20480))

        assert result.get(ContainerKind.PROFILE).id == "vol-0"
        assert result.get(ContainerKind.OFFICE_DATA).id == "vol-1"

    def test_label_beats_position(self, resolver):
        volumes = [make_volume("vol-0", 20480, label="ODFC-jdoe"), make_volume("vol-1", 20480, label="Profile-jdoe")]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=20480), office_policy(max_size_mb=20480))

        assert result.get(ContainerKind.OFFICE_DATA).id == "vol-0"
        assert result.get(ContainerKind.PROFILE).id == "vol-1"

    def test_more_than_two_unlabeled_keeps_first_two(self, resolver):
        volumes = [make_volume(f"vol-{i}", 20480) for i in range(4)]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=20480), office_policy(max_size_mb=20480))

        assert result.get(ContainerKind.PROFILE).id == "vol-0"
        assert result.get(ContainerKind.OFFICE_DATA).id == "vol-1"
        assert len(result.assignments) == 2

    def test_enabled_kind_left_unmatched(self, resolver):
        volumes = [make_volume("vol-0", 20480, label="O365")]

        result = resolver.resolve(volumes, profile_policy(max_size_mb=20480), office_policy(max_size_mb=20480))

        assert result.get(ContainerKind.OFFICE_DATA).id == "vol-0"
        assert result.is_assigned(ContainerKind.PROFILE) is False


class TestSingleKind:
    def test_first_free_volume_wins(self, resolver):
        volumes = [make_volume("a", 1000), make_volume("b", 30720), make_volume("c", 30720)]

        result = resolver.resolve(volumes, profile_policy(enabled=False), office_policy())

        assert result.get(ContainerKind.OFFICE_DATA).id == "a"
        assert result.is_assigned(ContainerKind.PROFILE) is False
        assert result.kinds == [ContainerKind.OFFICE_DATA]


class _AlwaysOffice(VolumeMatcher):
    name = "always_office"

    def applies(self, context):
        return True

    def match(self, volume, context):
        return ContainerKind.OFFICE_DATA


class TestInvariants:
    def test_matcher_cannot_assign_disabled_kind(self):
        from container_monitor.services.resolver import SingleKindMatcher

        resolver = ContainerResolver([_AlwaysOffice(), SingleKindMatcher()])
        volumes = [make_volume("a", 30720), make_volume("b", 30720)]

        result = resolver.resolve(volumes, profile_policy(), office_policy(enabled=False))

        assert result.is_assigned(ContainerKind.OFFICE_DATA) is False
        assert result.get(ContainerKind.PROFILE).id == "a"

    def test_no_volume_assigned_twice(self, resolver):
        sizes = [10240, 20480, 30720]
        labels = ["", "Profile", "ODFC"]
        policy_sets = [
            (profile_policy(max_size_mb=p), office_policy(enabled=e, max_size_mb=o))
            for p, o, e in itertools.product([10240, 30720], [10240, 30720], [True, False])
        ]

        for (p_policy, o_policy), size_a, size_b, label_a, label_b in itertools.product(
            policy_sets, sizes, sizes, labels, labels
        ):
            volumes = [make_volume("a", size_a, label=label_a), make_volume("b", size_b, label=label_b)]
            result = resolver.resolve(volumes, p_policy, o_policy)

            ids = [v.id for v in result.assignments.values()]
            assert len(ids) == len(set(ids))
            if not o_policy.enabled:
                assert not result.is_assigned(ContainerKind.OFFICE_DATA)

    def test_deterministic(self, resolver):
        volumes = [
            make_volume("a", 20480, label="data"),
            make_volume("b", 20480, label="office"),
            make_volume("c", 20480),
        ]
        policies = (profile_policy(max_size_mb=20480), office_policy(max_size_mb=20480))

        first = resolver.resolve(volumes, *policies)
        for _ in range(10):
            assert resolver.resolve(volumes, *policies) == first

    def test_assignment_rejects_double_assignment(self):
        volume = make_volume("a", 30720)
        with pytest.raises(ValidationError):
            ResolvedAssignment(
                assignments={ContainerKind.PROFILE: volume, ContainerKind.OFFICE_DATA: volume}
            )
