"""Tests for value classification and membership."""

import datetime
import itertools
import math
from dataclasses import dataclass

from typedsig import INCONSISTENT, UNKNOWN, Kind, record_type
from typedsig.checker import (
    Mismatch,
    determine_types,
    determine_types_loose,
    determine_types_strict,
    validate,
)
from typedsig.checker.classify import merge_shapes
from typedsig.env import (
    DEFAULT_ENV,
    Array,
    Date,
    FiniteNumber,
    Integer,
    NegativeFiniteNumber,
    NonZeroFiniteNumber,
    NonZeroValidNumber,
    Null,
    Number,
    Object,
    Pair,
    PositiveFiniteNumber,
    PositiveInteger,
    RegexFlags,
    StrMap,
    String,
    ValidDate,
    ValidNumber,
)
from typedsig.types import MISSING


class TestDetermineTypes:
    """Test classification of groups of values."""

    def test_no_values_is_unknown(self) -> None:
        assert determine_types(DEFAULT_ENV, frozenset(), []) == [UNKNOWN]

    def test_shared_nullary_type(self) -> None:
        assert determine_types_strict(DEFAULT_ENV, [1, 2.5]) == [Number]

    def test_parameters_refined_from_children(self) -> None:
        assert determine_types_strict(DEFAULT_ENV, [[1], [2]]) == [Array(Number)]
        assert determine_types_strict(DEFAULT_ENV, [[[1]]]) == [Array(Array(Number))]

    def test_empty_container_keeps_unknown_parameter(self) -> None:
        assert determine_types_strict(DEFAULT_ENV, [[]]) == [Array(UNKNOWN)]

    def test_empty_container_merges_with_populated_one(self) -> None:
        assert determine_types_strict(DEFAULT_ENV, [[], ["a"]]) == [Array(String)]

    def test_no_common_type(self) -> None:
        assert determine_types(DEFAULT_ENV, frozenset(), [1, "a"]) == [INCONSISTENT]
        assert determine_types_strict(DEFAULT_ENV, [1, "a"]) == []
        assert determine_types_loose(DEFAULT_ENV, [1, "a"]) == []

    def test_heterogeneous_children(self) -> None:
        """Loose mode keeps a container whose children disagree; strict does not."""
        assert determine_types_loose(DEFAULT_ENV, [[1, "a"]]) == [Array(INCONSISTENT)]
        assert determine_types_strict(DEFAULT_ENV, [[1, "a"]]) == []

    def test_binary_types(self) -> None:
        env = [Pair, Number, String]
        assert determine_types_strict(env, [(1, "a")]) == [Pair(Number, String)]

    def test_str_map_children_in_key_order(self) -> None:
        result = determine_types_strict(DEFAULT_ENV, [{"b": "x", "a": "y"}])
        assert result == [Object, StrMap(String)]

    def test_environment_order_is_kept(self) -> None:
        env = [String, Null, Number]
        assert determine_types_loose(env, [None]) == [Null]
        assert determine_types_loose([Number, ValidNumber], [1]) == [Number, ValidNumber]

    def test_circular_value_terminates(self) -> None:
        xs: list[object] = []
        xs.append(xs)
        assert determine_types_loose(DEFAULT_ENV, [xs]) == [Array(INCONSISTENT)]
        assert determine_types_strict(DEFAULT_ENV, [xs]) == []

    def test_shared_reference_is_not_circular(self) -> None:
        shared = [1]
        assert determine_types_strict(DEFAULT_ENV, [[shared, shared]]) == [
            Array(Array(Number))
        ]

    def test_nested_unknown_merges_with_later_evidence(self) -> None:
        forward = determine_types(DEFAULT_ENV, frozenset(), [[[]], [[1]]])
        backward = determine_types(DEFAULT_ENV, frozenset(), [[[1]], [[]]])
        assert forward == backward == [Array(Array(Number))]

    def test_nested_unknown_rejects_conflicting_evidence(self) -> None:
        assert determine_types_strict(DEFAULT_ENV, [[[]], [[1]], [["x"]]]) == []

    def test_permutation_invariance(self) -> None:
        values = [[], ["a"], ["b", "c"]]
        expected = set(determine_types(DEFAULT_ENV, frozenset(), values))
        for perm in itertools.permutations(values):
            assert set(determine_types(DEFAULT_ENV, frozenset(), list(perm))) == expected

    def test_permutation_invariance_with_nested_containers(self) -> None:
        values = [[[]], [[1]], [[2, 3]], []]
        expected = determine_types(DEFAULT_ENV, frozenset(), values)
        assert expected == [Array(Array(Number))]
        for perm in itertools.permutations(values):
            assert determine_types(DEFAULT_ENV, frozenset(), list(perm)) == expected

    def test_no_duplicates(self) -> None:
        result = determine_types(DEFAULT_ENV, frozenset(), [[1], [2], [3]])
        assert len(result) == len(set(result))


class TestMergeShapes:
    """Test filling unknown parameters from classified children."""

    def test_fills_unknown_leaves(self) -> None:
        assert merge_shapes(Array(UNKNOWN), Array(String)) == Array(String)
        assert merge_shapes(Array(Array(UNKNOWN)), Array(Array(Number))) == Array(
            Array(Number)
        )

    def test_keeps_known_parts(self) -> None:
        assert merge_shapes(Pair(Number, UNKNOWN), Pair(UNKNOWN, String)) == Pair(
            Number, String
        )

    def test_disagreement(self) -> None:
        assert merge_shapes(Array(Number), Array(String)) is None
        assert merge_shapes(Array(UNKNOWN), Object) is None

    def test_inconsistent_children(self) -> None:
        assert merge_shapes(Array(UNKNOWN), INCONSISTENT) == INCONSISTENT


class TestForeignTypes:
    """Test ad-hoc types synthesized from explicit foreign tags."""

    def test_shared_tag_synthesizes_type(self) -> None:
        class DateA:
            typedsig_type = "my/Date"

        class DateB:
            typedsig_type = "my/Date"

        (t,) = determine_types(DEFAULT_ENV, frozenset(), [DateA(), DateB()])
        assert t.kind is Kind.NULLARY
        assert t.name == "my/Date"
        assert t.test(DateB())

    def test_different_tags_are_inconsistent(self) -> None:
        class Left:
            typedsig_type = "my/Left"

        class Right:
            typedsig_type = "my/Right"

        assert determine_types(DEFAULT_ENV, frozenset(), [Left(), Right()]) == [
            INCONSISTENT
        ]

    def test_untagged_objects_are_inconsistent(self) -> None:
        assert determine_types(DEFAULT_ENV, frozenset(), [object()]) == [INCONSISTENT]


@dataclass
class Point:
    x: object
    y: object


class TestValidate:
    """Test membership of one value in one type."""

    def test_member(self) -> None:
        assert validate(Array(Number), [1, 2]) is None

    def test_child_failure_reports_path(self) -> None:
        assert validate(Array(Number), [1, "x"]) == Mismatch("x", ("$1",))
        nested = Array(Array(Number))
        assert validate(nested, [[1], [None]]) == Mismatch(None, ("$1", "$1"))

    def test_record_field_failure(self) -> None:
        point = record_type({"x": Number, "y": Number})
        assert validate(point, {"x": 0, "y": None}) == Mismatch(None, ("y",))

    def test_record_missing_field(self) -> None:
        point = record_type({"x": Number, "y": Number})
        assert validate(point, {"x": 0}) == Mismatch(MISSING, ("y",))

    def test_record_extra_fields_allowed(self) -> None:
        point = record_type({"x": Number})
        assert validate(point, {"x": 0, "z": "extra"}) is None

    def test_record_matches_object_attributes(self) -> None:
        point = record_type({"x": Number, "y": Number})
        assert validate(point, Point(1, 2)) is None
        assert validate(point, Point(1, "2")) == Mismatch("2", ("y",))

    def test_record_rejects_none(self) -> None:
        assert validate(record_type({"x": Number}), None) == Mismatch(None)

    def test_ancestor_failure_reports_whole_value(self) -> None:
        assert validate(Integer, 1.5) == Mismatch(1.5)
        assert validate(PositiveInteger, "3") == Mismatch("3")

    def test_membership_implies_ancestor_membership(self) -> None:
        chain = {
            PositiveInteger: [Integer, FiniteNumber, ValidNumber, Number],
            Integer: [FiniteNumber, ValidNumber, Number],
            FiniteNumber: [ValidNumber, Number],
            PositiveFiniteNumber: [FiniteNumber, ValidNumber, Number],
            NonZeroValidNumber: [ValidNumber, Number],
        }
        samples = [0, 1, -1, 2.0, 2.5, math.inf, math.nan, True, "1", None]
        for t, ancestors in chain.items():
            for value in samples:
                if validate(t, value) is None:
                    assert all(validate(s, value) is None for s in ancestors)

    def test_nan_is_not_valid_number(self) -> None:
        assert validate(Number, math.nan) is None
        assert validate(ValidNumber, math.nan) is not None

    def test_finite_refinements(self) -> None:
        assert validate(PositiveFiniteNumber, 2) is None
        assert validate(PositiveFiniteNumber, math.inf) is not None
        assert validate(PositiveFiniteNumber, -2) is not None
        assert validate(NegativeFiniteNumber, -0.5) is None
        assert validate(NegativeFiniteNumber, -math.inf) is not None
        assert validate(NonZeroFiniteNumber, 0) is not None
        assert validate(NonZeroFiniteNumber, 3) is None

    def test_non_zero_valid_number(self) -> None:
        assert validate(NonZeroValidNumber, math.inf) is None
        assert validate(NonZeroValidNumber, 0.0) is not None
        assert validate(NonZeroValidNumber, math.nan) is not None

    def test_valid_date(self) -> None:
        assert validate(ValidDate, datetime.date(2020, 2, 29)) is None
        assert validate(ValidDate, "2020-02-29") is not None
        assert ValidDate.supertypes == (Date,)

    def test_regex_flags(self) -> None:
        assert validate(RegexFlags, "") is None
        assert validate(RegexFlags, "ims") is None
        assert validate(RegexFlags, "g") is not None
        assert str(RegexFlags) == "RegexFlags"
