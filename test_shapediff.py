"""Tests for the ShapeDiff shape comparator and data model."""

import pytest
from shapediff import (
    compare_shape,
    shapes_match,
    ComparisonPath,
    Endpoint,
    ErrorKind,
    JsonKind,
    MismatchRecord,
    MismatchType,
    ShapeMismatchError,
    format_endpoint,
)


QUIZ = {"id": 1, "name": "Quiz A"}

NESTED = {
    "quizzes": [
        {"quizId": 1, "name": "Quiz A", "tags": ["a", "b"], "owner": None},
        {"quizId": 2, "name": "Quiz B", "tags": [], "owner": {"id": 7, "active": True}},
    ],
    "total": 2,
    "page": {"next": None, "size": 50.5},
}


class TestReflexivity:
    """A value always has the same shape as itself."""

    @pytest.mark.parametrize("value", [
        None, True, 0, 1.5, "", "text", [], {}, [1, "a", None], QUIZ, NESTED,
    ])
    def test_value_matches_itself(self, value):
        assert compare_shape(value, value) is None

    def test_scalar_values_are_not_compared(self):
        """Different values of the same kind still match."""
        old = {"id": 1, "name": "Quiz A", "active": True, "deleted": None, "score": 1.5}
        new = {"id": 99, "name": "Other", "active": False, "deleted": None, "score": -3}

        assert compare_shape(new, old) is None

    def test_nested_values_differ_only_in_scalars(self):
        other = {
            "quizzes": [
                {"quizId": 10, "name": "X", "tags": ["z", "y"], "owner": None},
                {"quizId": 20, "name": "Y", "tags": [], "owner": {"id": 1, "active": False}},
            ],
            "total": 0,
            "page": {"next": None, "size": 1},
        }
        assert compare_shape(other, NESTED) is None
        assert shapes_match(other, NESTED) is True

    def test_int_and_float_are_both_numbers(self):
        assert compare_shape({"n": 1}, {"n": 1.0}) is None


class TestObjectComparison:
    """Key set checks on objects."""

    def test_key_missing_in_reference(self):
        result = compare_shape({"id": 1, "extra": "x"}, {"id": 1}, "/admin/quiz")

        assert result.type == MismatchType.MISSING_IN_REFERENCE
        assert result.path == ComparisonPath(("extra",))
        assert result.client_value == "x"
        assert result.reference_value is None
        assert result.endpoint == "/admin/quiz"

    def test_key_missing_in_client(self):
        result = compare_shape({"id": 1}, {"id": 1, "name": "Quiz A"})

        assert result.type == MismatchType.MISSING_IN_CLIENT
        assert result.path.segments == ("name",)
        assert result.client_value is None
        assert result.reference_value == "Quiz A"

    def test_client_keys_are_checked_before_reference_keys(self):
        result = compare_shape({"b": 1}, {"a": 1})

        assert result.type == MismatchType.MISSING_IN_REFERENCE
        assert result.path.segments == ("b",)

    def test_first_divergence_in_sorted_key_order(self):
        client = {"zeta": "1", "alpha": "1"}
        reference = {"alpha": 1, "zeta": 1}

        result = compare_shape(client, reference)
        assert result.path.segments == ("alpha",)

    def test_missing_key_differs_from_explicit_null(self):
        result = compare_shape({"owner": None}, {"owner": {"id": 1}})

        assert result.type == MismatchType.TYPE_MISMATCH
        assert result.path.segments == ("owner",)
        assert result.reference_value == {"id": 1}

    def test_nested_object_path(self):
        client = {"page": {"next": None, "size": "50"}}
        reference = {"page": {"next": None, "size": 50}}

        result = compare_shape(client, reference)
        assert result.path.segments == ("page", "size")
        assert result.path.to_jsonpath() == "$.page.size"


class TestArrayComparison:
    """Length and element checks on arrays."""

    def test_length_mismatch_captures_full_arrays(self):
        result = compare_shape([1, 2], [1, 2, 3])

        assert result.type == MismatchType.ARRAY_LENGTH_MISMATCH
        assert result.path == ComparisonPath()
        assert result.client_value == [1, 2]
        assert result.reference_value == [1, 2, 3]

    def test_length_mismatch_ignores_element_kinds(self):
        """Elements are not inspected once lengths differ."""
        result = compare_shape(["a"], [{"x": 1}, None])

        assert result.type == MismatchType.ARRAY_LENGTH_MISMATCH
        assert len(result.path) == 0

    def test_element_mismatch_reports_index(self):
        client = {"quizzes": [{"quizId": 1}, {"quizId": "2"}]}
        reference = {"quizzes": [{"quizId": 1}, {"quizId": 2}]}

        result = compare_shape(client, reference)
        assert result.path.segments == ("quizzes", 1, "quizId")
        assert result.path.to_jsonpath() == "$.quizzes[1].quizId"
        assert result.client_value == "2"
        assert result.reference_value == 2

    def test_first_element_mismatch_wins(self):
        result = compare_shape(["a", 1, None], [1, "b", None])
        assert result.path.segments == (0,)

    def test_empty_arrays_match(self):
        assert compare_shape({"tags": []}, {"tags": []}) is None


class TestTypeMismatch:
    """Different kinds at the same position."""

    @pytest.mark.parametrize("client,reference", [
        ("1", 1),
        (True, 1),
        (0, False),
        (None, "x"),
        ({}, []),
        ([], "[]"),
        ({"id": 1}, None),
    ])
    def test_different_kinds(self, client, reference):
        result = compare_shape(client, reference, "/x")

        assert result.type == MismatchType.TYPE_MISMATCH
        assert result.path == ComparisonPath()
        assert result.client_value == client
        assert result.reference_value == reference

    def test_kinds_are_exposed_on_record(self):
        result = compare_shape({"id": "1"}, {"id": 1})

        assert result.client_kind == JsonKind.STRING
        assert result.reference_kind == JsonKind.NUMBER

    def test_explicit_start_path(self):
        start = ComparisonPath(("data",))
        result = compare_shape("1", 1, "/e", start)
        assert result.path.segments == ("data",)


class TestJsonKind:
    """Classification of decoded JSON values."""

    def test_kinds(self):
        assert JsonKind.of(None) == JsonKind.NULL
        assert JsonKind.of(False) == JsonKind.BOOLEAN
        assert JsonKind.of(3) == JsonKind.NUMBER
        assert JsonKind.of(3.5) == JsonKind.NUMBER
        assert JsonKind.of("3") == JsonKind.STRING
        assert JsonKind.of([]) == JsonKind.ARRAY
        assert JsonKind.of({}) == JsonKind.OBJECT

    def test_scalar_flag(self):
        assert JsonKind.STRING.is_scalar
        assert JsonKind.NULL.is_scalar
        assert not JsonKind.ARRAY.is_scalar
        assert not JsonKind.OBJECT.is_scalar

    @pytest.mark.parametrize("value", [object(), (1, 2), {1, 2}, b"bytes"])
    def test_non_json_values_rejected(self, value):
        with pytest.raises(TypeError):
            JsonKind.of(value)

    def test_validate_names_offending_position(self):
        JsonKind.validate({"a": [1, None, {"b": True}]})
        with pytest.raises(TypeError, match=r"\$\.a\[1\]"):
            JsonKind.validate({"a": [1, (2, 3)]})
        with pytest.raises(TypeError, match="non-string key"):
            JsonKind.validate({"a": {1: "x"}})


class TestComparisonPath:
    """Path rendering and resolution."""

    def test_root(self):
        assert ComparisonPath().to_jsonpath() == "$"
        assert str(ComparisonPath()) == "$"

    def test_child_is_new_path(self):
        root = ComparisonPath()
        child = root.child("items").child(0)

        assert root.segments == ()
        assert child.segments == ("items", 0)
        assert list(child) == ["items", 0]

    def test_special_key_rendering(self):
        path = ComparisonPath(("items", 0, "odd key", "it's"))
        assert path.to_jsonpath() == "$.items[0]['odd key']['it\\'s']"

    def test_resolve(self):
        path = ComparisonPath(("quizzes", 1, "name"))
        assert path.resolve(NESTED) == ["Quiz B"]

    def test_resolve_root(self):
        assert ComparisonPath().resolve(QUIZ) == [QUIZ]

    def test_resolve_missing(self):
        assert ComparisonPath(("nope",)).resolve(QUIZ) == []

    def test_mismatch_locate(self):
        client = {"quizzes": [{"quizId": 1}, {"quizId": "2"}]}
        reference = {"quizzes": [{"quizId": 1}, {"quizId": 2}]}

        result = compare_shape(client, reference)
        assert result.locate(client, reference) == (["2"], [2])

    def test_resolve_literal_star_key(self):
        document = {"*": 1, "other": "x"}
        assert ComparisonPath(("*",)).resolve(document) == [1]

    def test_mismatch_under_star_key(self):
        client = {"*": {"id": "1"}, "id": 9}
        reference = {"*": {"id": 1}, "id": 9}

        result = compare_shape(client, reference)
        assert result.path.segments == ("*", "id")
        assert result.locate(client, reference) == (["1"], [1])

    def test_mismatch_context(self):
        client = {"quizzes": [{"quizId": 1}, {"quizId": "2"}]}
        reference = {"quizzes": [{"quizId": 1}, {"quizId": 2}]}

        context = compare_shape(client, reference).context(client, reference)
        assert context == {
            "parent_path": "$.quizzes[1]",
            "client_parent": {"quizId": "2"},
            "reference_parent": {"quizId": 2},
        }

    def test_root_mismatch_has_no_context(self):
        assert compare_shape("1", 1).context("1", 1) == {}


class TestMismatchReporting:
    """Diagnostics carried by mismatch records and errors."""

    def test_record_to_dict(self):
        record = compare_shape({"id": "1", "name": "Quiz A"}, QUIZ, "/admin/quiz/1")

        assert record.to_dict() == {
            "endpoint": "/admin/quiz/1",
            "path": "$.id",
            "segments": ["id"],
            "type": "TYPE_MISMATCH",
            "client_value": "1",
            "reference_value": 1,
        }

    def test_record_is_immutable(self):
        record = compare_shape("1", 1)
        with pytest.raises(AttributeError):
            record.path = ComparisonPath(("x",))

    def test_type_mismatch_message(self):
        record = compare_shape({"id": "1"}, {"id": 1}, "/admin/quiz/1")

        assert record.message == (
            'Shape mismatch on /admin/quiz/1 at $.id: string vs number '
            '(client: "1", reference: 1)'
        )

    def test_length_message(self):
        record = compare_shape([1, 2], [1, 2, 3], "/list")
        assert "array length 2 vs 3" in record.message
        assert "[1, 2, 3]" in record.message

    def test_missing_key_messages(self):
        missing_ref = compare_shape({"a": 1}, {}, "/e")
        missing_client = compare_shape({}, {"a": 1}, "/e")

        assert "key missing in reference" in missing_ref.message
        assert "key missing in client" in missing_client.message
        assert "$.a" in missing_client.message

    def test_error_wraps_record(self):
        record = MismatchRecord("/e", ComparisonPath(("id",)), "1", 1)
        error = ShapeMismatchError(record)

        assert error.kind == ErrorKind.SHAPE_MISMATCH
        assert error.mismatch is record
        assert error.endpoint == "/e"
        assert str(error) == record.message
        assert error.to_dict() == {
            "code": "SHAPE_MISMATCH",
            "message": record.message,
            "details": record.to_dict(),
        }

    def test_error_with_context(self):
        record = MismatchRecord("/e", ComparisonPath(("quiz", "id")), "1", 1)
        context = {"parent_path": "$.quiz", "client_parent": {"id": "1"}, "reference_parent": {"id": 1}}

        details = ShapeMismatchError(record, context).to_dict()["details"]
        assert details["path"] == "$.quiz.id"
        assert details["context"] == context


class TestEndpoints:
    """Endpoint catalog and placeholder substitution."""

    def test_format_endpoint(self):
        assert format_endpoint("/admin/quiz/{}/name", 5) == "/admin/quiz/5/name"
        assert format_endpoint("/admin/quiz/list") == "/admin/quiz/list"

    def test_format_multiple_placeholders(self):
        assert format_endpoint("/a/{}/b/{}", 1, "x") == "/a/1/b/x"

    def test_wrong_argument_count(self):
        with pytest.raises(ValueError):
            format_endpoint("/admin/quiz/{}")
        with pytest.raises(ValueError):
            format_endpoint("/admin/quiz/list", 1)

    def test_catalog(self):
        assert Endpoint.ADMIN_QUIZ_ID_TRANSFER.value == "/admin/quiz/{}/transfer"
        assert Endpoint.ADMIN_QUIZ_ID_TRANSFER.placeholders == 1
        assert Endpoint.ADMIN_QUIZ_LIST.placeholders == 0
        assert Endpoint.ADMIN_QUIZ_ID_RESTORE.format(3) == "/admin/quiz/3/restore"

    def test_lookup(self):
        assert Endpoint.lookup("admin_quiz_trash") is Endpoint.ADMIN_QUIZ_TRASH
        assert Endpoint.lookup("/admin/quiz/{}/name") is Endpoint.ADMIN_QUIZ_ID_NAME
        with pytest.raises(ValueError):
            Endpoint.lookup("/does/not/exist")
