"""Unit tests — Action validation, execution, installation and the @action decorator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from abstract_logic.action import Action, ActionContext, action
from abstract_logic.base import BaseLogic
from abstract_logic.exceptions import (
    ActionDefinitionError,
    ArgumentVerificationError,
    LogicFailure,
    MissingArgumentsError,
)
from abstract_logic.result import Result


def _multiply(logic, ctx):
    return ctx["a"] * ctx["b"]


class PlainLogic(BaseLogic):
    pass


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestActionDefinition:
    def test_defaults_to_empty_needs_and_verifiers(self) -> None:
        act = Action("noop", lambda logic, ctx: None)
        assert act.needs == ()
        assert dict(act.verifiers) == {}
        assert act.description == ""

    def test_single_string_need(self) -> None:
        assert Action("a", _multiply, needs="foo").needs == ("foo",)

    def test_duplicate_needs_collapse_in_order(self) -> None:
        assert Action("a", _multiply, needs=["b", "a", "b"]).needs == ("b", "a")

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ActionDefinitionError, match="has no name"):
            Action("", _multiply)

    def test_non_callable_handler_raises(self) -> None:
        with pytest.raises(ActionDefinitionError, match="has no code argument"):
            Action("broken", "not callable")  # type: ignore[arg-type]

    def test_non_callable_verifier_raises(self) -> None:
        with pytest.raises(ActionDefinitionError, match="verifier for 'a'"):
            Action("broken", _multiply, verify={"a": 5})  # type: ignore[dict-item]

    def test_verifiers_are_read_only(self) -> None:
        act = Action("a", _multiply, verify={"a": bool})
        with pytest.raises(TypeError):
            act.verifiers["b"] = bool  # type: ignore[index]

    def test_describe(self) -> None:
        act = Action("mult", _multiply, needs=["a", "b"], verify={"b": bool}, description="Multiply.")
        assert act.describe() == {
            "name": "mult",
            "needs": ["a", "b"],
            "verified": ["b"],
            "description": "Multiply.",
        }


# ---------------------------------------------------------------------------
# Argument verification
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestVerifyArguments:
    def test_all_required_present_passes(self) -> None:
        Action("a", _multiply, needs=["a", "b"]).verify_arguments({"a": 1, "b": 2})

    def test_extra_arguments_are_accepted(self) -> None:
        Action("a", _multiply, needs=["a"]).verify_arguments({"a": 1, "extra": True})

    def test_missing_reports_every_missing_name(self) -> None:
        act = Action("needings", _multiply, needs=["foo", "bar", "baz"])
        with pytest.raises(MissingArgumentsError) as info:
            act.verify_arguments({"bar": 1})
        assert info.value.missing == ["foo", "baz"]
        assert "foo" in str(info.value) and "baz" in str(info.value)
        assert "needings" in str(info.value)

    def test_missing_check_precedes_verifiers(self) -> None:
        verifier = MagicMock(return_value=False)
        act = Action("a", _multiply, needs=["b"], verify={"a": verifier})
        with pytest.raises(MissingArgumentsError):
            act.verify_arguments({"a": 1})
        verifier.assert_not_called()

    def test_verifier_receives_value(self) -> None:
        verifier = MagicMock(return_value=True)
        Action("a", _multiply, verify={"a": verifier}).verify_arguments({"a": 42})
        verifier.assert_called_once_with(42)

    def test_failing_verifier_raises_with_field(self) -> None:
        act = Action("mult", _multiply, verify={"factor": str.isdigit})
        with pytest.raises(ArgumentVerificationError, match="'factor'") as info:
            act.verify_arguments({"factor": "foo"})
        assert info.value.field == "factor"

    def test_verifier_skipped_for_absent_field(self) -> None:
        verifier = MagicMock(return_value=False)
        Action("a", _multiply, verify={"missing": verifier}).verify_arguments({"other": 1})
        verifier.assert_not_called()

    def test_some_failing_field_is_reported(self) -> None:
        act = Action("a", _multiply, verify={"x": lambda v: False, "y": lambda v: False})
        with pytest.raises(ArgumentVerificationError) as info:
            act.verify_arguments({"x": 1, "y": 2})
        assert info.value.field in {"x", "y"}

    @pytest.mark.parametrize(
        ("needs", "args", "ok"),
        [
            ((), {}, True),
            (("a",), {"a": 1}, True),
            (("a", "b"), {"a": 1, "b": 2, "c": 3}, True),
            (("a",), {}, False),
            (("a", "b"), {"b": 1}, False),
        ],
    )
    def test_required_subset_property(self, needs, args, ok) -> None:
        act = Action("a", _multiply, needs=needs)
        if ok:
            act.verify_arguments(args)
        else:
            with pytest.raises(MissingArgumentsError) as info:
                act.verify_arguments(args)
            assert set(info.value.missing) == set(needs) - set(args)


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestExecute:
    def test_returns_success_result(self) -> None:
        result = Action("a", _multiply, needs=["a", "b"]).execute(PlainLogic(), {"a": 2, "b": 3})
        assert isinstance(result, Result)
        assert result.value == 6

    def test_handler_not_called_when_verification_fails(self) -> None:
        handler = MagicMock()
        act = Action("a", handler, needs=["a"])
        with pytest.raises(MissingArgumentsError):
            act.execute(PlainLogic(), {})
        handler.assert_not_called()

    def test_handler_receives_instance_and_context(self) -> None:
        handler = MagicMock(return_value="ok")
        logic = PlainLogic()
        Action("a", handler).execute(logic, {"x": 1})
        called_logic, ctx = handler.call_args.args
        assert called_logic is logic
        assert isinstance(ctx, ActionContext)
        assert ctx.instance is logic
        assert dict(ctx) == {"x": 1}

    def test_domain_failure_becomes_failed_result(self) -> None:
        def handler(logic, ctx):
            raise LogicFailure("k", "m")

        result = Action("a", handler).execute(PlainLogic())
        assert result.is_failed
        assert result.key == "k"

    def test_defect_propagates(self) -> None:
        def handler(logic, ctx):
            raise KeyError("oops")

        with pytest.raises(KeyError):
            Action("a", handler).execute(PlainLogic(), {})

    def test_caller_mapping_is_not_shared_with_handler(self) -> None:
        args = {"a": 1}

        def handler(logic, ctx):
            return ctx.args

        seen = Action("a", handler).execute(PlainLogic(), args).value
        args["a"] = 2
        assert seen["a"] == 1


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestActionContext:
    def test_mapping_views(self) -> None:
        ctx = ActionContext(PlainLogic(), {"a": 1, "b": 2})
        assert ctx["a"] == 1
        assert ctx.get("missing") is None
        assert len(ctx) == 2
        assert sorted(ctx) == ["a", "b"]
        assert dict(**ctx) == {"a": 1, "b": 2}

    def test_args_are_read_only(self) -> None:
        ctx = ActionContext(PlainLogic(), {"a": 1})
        with pytest.raises(TypeError):
            ctx.args["a"] = 2  # type: ignore[index]

    def test_logic_without_name_is_owning_instance(self) -> None:
        logic = PlainLogic()
        assert ActionContext(logic, {}).logic() is logic

    def test_logic_with_name_goes_through_manager(self) -> None:
        logic = PlainLogic()
        manager = MagicMock()
        logic.set_manager(manager)
        ActionContext(logic, {}).logic("Other")
        manager.lookup.assert_called_once_with("Other")


# ---------------------------------------------------------------------------
# Installation and declaration
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestInstallation:
    def test_class_access_returns_action(self) -> None:
        class Declared(BaseLogic):
            @action(needs=["a", "b"])
            def mult(self, ctx):
                return ctx["a"] * ctx["b"]

        assert isinstance(Declared.mult, Action)
        assert Declared().mult(a=3, b=4).value == 12

    def test_bound_callable_keeps_handler_metadata(self) -> None:
        class Declared(BaseLogic):
            @action
            def documented(self, ctx):
                """Does a thing."""

        bound = Declared().documented
        assert bound.__name__ == "documented"
        assert bound.__doc__ == "Does a thing."

    def test_install_on_logic_class(self) -> None:
        class Target(BaseLogic):
            pass

        Action("mult", _multiply, needs=["a", "b"]).install(Target)
        assert Target().mult(a=2, b=5).value == 10
        assert "mult" in Target.action_names()
        assert "mult" not in BaseLogic.action_names()

    def test_install_under_alias(self) -> None:
        class Target(BaseLogic):
            pass

        Action("mult", _multiply).install(Target, "times")
        assert Target().times(a=2, b=2).value == 4
        assert Target.get_action("times").name == "mult"

    def test_install_on_plain_class(self) -> None:
        class Plain:
            pass

        Action("mult", _multiply).install(Plain)
        assert Plain().mult(a=1, b=9).value == 9

    def test_bound_callable_has_keyword_signature(self) -> None:
        import inspect

        class Declared(BaseLogic):
            @action(needs="a")
            def double(self, ctx):
                return ctx["a"] * 2

        bound = Declared().double
        assert not hasattr(bound, "__wrapped__")
        params = list(inspect.signature(bound).parameters.values())
        assert [p.kind for p in params] == [inspect.Parameter.VAR_KEYWORD]
        assert bound(a=4).value == 8

    def test_install_on_parent_reaches_existing_subclass(self) -> None:
        class Parent(BaseLogic):
            pass

        class Child(Parent):
            pass

        Action("double", lambda logic, ctx: ctx["a"] * 2, needs="a").install(Parent)
        assert Child().call("double", a=2).value == 4
        assert "double" in Child.action_names()
        assert Child.get_action("double").name == "double"

    def test_subclass_plain_attribute_still_hides_later_parent_install(self) -> None:
        class Parent(BaseLogic):
            pass

        class Child(Parent):
            double = None

        Action("double", _multiply).install(Parent)
        assert "double" in Parent.action_names()
        assert "double" not in Child.action_names()

    @pytest.mark.parametrize("name", ["call", "logic", "config", "describe", "error"])
    def test_install_rejects_base_member_names(self, name: str) -> None:
        class Target(BaseLogic):
            pass

        with pytest.raises(ActionDefinitionError, match=name):
            Action(name, _multiply).install(Target)
        assert Target.call is BaseLogic.call

    def test_declaration_rejects_base_member_names(self) -> None:
        with pytest.raises(ActionDefinitionError, match="call"):

            class Clashing(BaseLogic):
                @action
                def call(self, ctx):
                    return None

    def test_declaration_rejects_explicit_base_member_name(self) -> None:
        with pytest.raises(ActionDefinitionError, match="manager"):

            class Clashing(BaseLogic):
                @action("manager")
                def impl(self, ctx):
                    return None

    def test_plain_class_install_has_no_reserved_names(self) -> None:
        class Plain:
            pass

        Action("call", _multiply).install(Plain)
        assert Plain().call(a=2, b=3).value == 6

    def test_decorator_defaults(self) -> None:
        @action
        def my_action(self, ctx):
            """First line.

            More detail.
            """

        assert isinstance(my_action, Action)
        assert my_action.name == "my_action"
        assert my_action.description.startswith("First line.")

    def test_decorator_with_options(self) -> None:
        @action("explicit", needs="x", verify={"x": bool}, description="Given.")
        def impl(self, ctx):
            return None

        assert impl.name == "explicit"
        assert impl.needs == ("x",)
        assert set(impl.verifiers) == {"x"}
        assert impl.description == "Given."
