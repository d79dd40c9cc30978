"""
Unit tests for FilterState parsing and the condition builder.
"""

import pytest

from archive_api.core.exceptions import InvalidFilterError
from archive_api.domain.filters import ENRICHED, FilterState, Operator, Predicate, build_conditions


class TestFilterStateParsing:
    def test_given_comma_separated_and_repeated_values_when_parsing_then_values_are_merged_and_normalized(self):
        """
        Given: intensity passed both repeated and comma-separated, with stray case and spaces
        When: Building a FilterState
        Then: A single lowercase set holds every value once
        """
        # Given
        params = {"intensity": ["High, peak", "PEAK"]}

        # When
        state = FilterState.from_params(params)

        # Then
        assert state.values_for("intensity") == frozenset({"high", "peak"})
        assert [name for name, _ in state.constraints] == ["intensity"]

    def test_given_empty_value_set_when_parsing_then_dimension_is_unconstrained(self):
        """
        Given: A dimension present with no values
        When: Building a FilterState
        Then: The dimension is treated as unconstrained, not as match-nothing
        """
        # When
        state = FilterState.from_params({"sport": [], "lighting": ""})

        # Then
        assert state == FilterState()
        assert build_conditions(state) == [ENRICHED]

    def test_given_unknown_dimension_when_parsing_then_raises_invalid_filter_error(self):
        # When / Then
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterState.from_params({"camera_make": ["canon"]})
        assert exc_info.value.code == "BAD_REQUEST"
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"dimension": "camera_make"}

    def test_given_non_canonical_value_when_parsing_then_raises_invalid_filter_error(self):
        # When / Then
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterState.from_params({"sport": ["curling"]})
        assert exc_info.value.details == {"dimension": "sport", "value": "curling"}

    def test_given_same_constraints_in_different_order_when_parsing_then_states_are_equal_and_hashable(self):
        """
        Given: The same constraints supplied in different orders
        When: Building two FilterStates
        Then: They compare equal and hash identically
        """
        # Given / When
        a = FilterState.from_params({"sport": ["volleyball"], "intensity": ["peak", "high"]})
        b = FilterState.from_params({"intensity": ["high", "peak"], "sport": "volleyball"})

        # Then
        assert a == b
        assert hash(a) == hash(b)
        assert [name for name, _ in a.constraints] == ["sport", "intensity"]

    def test_given_album_key_when_parsing_then_album_is_kept_outside_dimensions(self):
        # When
        state = FilterState.from_params({}, album_key="  nationals-2024 ")

        # Then
        assert state.album_key == "nationals-2024"
        assert state.constraints == ()
        assert build_conditions(state) == [ENRICHED, Predicate("album_key", Operator.eq, "nationals-2024")]


class TestBuildConditions:
    def test_given_empty_state_when_building_conditions_then_only_enriched_gate_is_present(self):
        # When
        predicates = build_conditions(FilterState())

        # Then
        assert predicates == [Predicate("sharpness", Operator.not_null)]

    def test_given_single_and_multiple_values_when_building_conditions_then_eq_and_sorted_in_are_used(self):
        """
        Given: sport with one value and intensity with two
        When: Building conditions
        Then: sport renders as EQ and intensity as IN with a sorted tuple, in registry order
        """
        # Given
        state = FilterState.from_params({"intensity": ["peak", "high"], "sport": ["volleyball"]})

        # When
        predicates = build_conditions(state)

        # Then
        assert predicates == [
            ENRICHED,
            Predicate("sport_type", Operator.eq, "volleyball", dimension="sport"),
            Predicate("action_intensity", Operator.in_, ("high", "peak"), dimension="intensity"),
        ]

    def test_given_excluded_dimension_when_building_conditions_then_its_constraint_is_omitted(self):
        # Given
        state = FilterState.from_params({"sport": ["volleyball"], "intensity": ["high", "peak"]})

        # When
        predicates = build_conditions(state, exclude="sport")

        # Then
        assert [p.column for p in predicates] == ["sharpness", "action_intensity"]

    def test_given_excluded_dimension_not_constrained_when_building_conditions_then_output_is_unchanged(self):
        # Given
        state = FilterState.from_params({"sport": ["volleyball"]})

        # When / Then
        assert build_conditions(state, exclude="lighting") == build_conditions(state)

    def test_given_album_constraint_when_excluding_a_dimension_then_album_predicate_is_kept(self):
        # Given
        state = FilterState.from_params({"sport": ["soccer"]}, album_key="league-2023")

        # When
        predicates = build_conditions(state, exclude="sport")

        # Then
        assert predicates == [ENRICHED, Predicate("album_key", Operator.eq, "league-2023")]

    def test_given_unknown_excluded_dimension_when_building_conditions_then_raises(self):
        with pytest.raises(InvalidFilterError):
            build_conditions(FilterState(), exclude="camera_make")

    def test_given_same_state_when_building_twice_then_predicates_are_identical(self):
        # Given
        state = FilterState.from_params({"lighting": ["soft", "natural", "backlit"]})

        # When / Then
        assert build_conditions(state) == build_conditions(state)
