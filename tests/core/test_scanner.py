"""scan_type の列挙順・フィルタ・default 解決・解決失敗のテスト。"""

from __future__ import annotations

import warnings
from typing import override

import pytest

from metascan.core.errors import NotFoundError
from metascan.core.scanner import TypeDescriptor, resolve_kinds, resolve_type, scan_type
from metascan.core.kind_registry import metadata_kind, kind_registry
from metascan.demos.kinds import Action, DeprecatedFeature, Service, Task
from metascan.demos.repeatable import MyTasks
from metascan.demos.services import OrderService, ProductService


@metadata_kind(name="test_scanner.Hidden", target=("type", "operation"))
class Hidden:
    note: str


@metadata_kind(name="test_scanner.Late", target="operation")
class Late:
    pass


class Plain:
    def a(self) -> None: ...

    def b(self) -> None: ...


@Service(name="Annotated")
@Hidden(note="type")
class Annotated:
    value = 3

    @Hidden(note="only hidden")
    def hidden_only(self) -> None: ...

    @Action(description="visible")
    @Hidden(note="also hidden")
    def mixed(self) -> None: ...

    @property
    def prop(self) -> int:
        return 1

    @staticmethod
    @Action(description="static", priority=5)
    def static(x: int) -> int:
        return x

    @classmethod
    @Action(description="class")
    def build(cls) -> Annotated:
        return cls()


def test_type_without_metadata_yields_empty_report() -> None:
    report = scan_type(Plain, {Service, Action, DeprecatedFeature})

    assert report.type_name == "Plain"
    assert report.findings == ()
    assert report.type_records == ()
    assert report.type_level_record is None


def test_order_service_scenario() -> None:
    report = scan_type(OrderService, {Service, Action, DeprecatedFeature})

    assert report.type_level_record is not None
    assert report.type_level_record.kind == "Service"
    assert report.type_level_record["name"] == "OrderService"
    assert [f.operation_name for f in report.findings] == ["process_order", "cancel_order"]

    process = report.finding("process_order")
    assert process is not None
    assert process.kinds() == ("Action",)
    (action,) = process.get("Action")
    assert action.as_dict() == {"description": "Processes the order", "priority": 2}

    cancel = report.finding("cancel_order")
    assert cancel is not None
    assert cancel.kinds() == ("Action", "DeprecatedFeature")
    (action,) = cancel.get("Action")
    assert action.as_dict() == {"description": "Cancels the order", "priority": 1}
    assert action.is_default("priority")
    (deprecated,) = cancel.get("DeprecatedFeature")
    assert deprecated["reason"] == "This feature is obsolete"
    assert deprecated["alternative"] == "Use cancel_order_v2()"


def test_product_service_scenario() -> None:
    report = scan_type(ProductService, {Service, Action, DeprecatedFeature})

    assert report.type_level_record is not None
    assert report.type_level_record["name"] == "ProductService"
    assert report.findings == ()


def test_repeatable_scenario_preserves_declaration_order() -> None:
    report = scan_type(MyTasks, {Task})

    assert [f.operation_name for f in report.findings] == ["perform_multiple_tasks"]
    tasks = report.findings[0].get("Task")
    assert [t.as_dict() for t in tasks] == [
        {"description": "Task 1", "priority": 3},
        {"description": "Task 2", "priority": 2},
    ]


def test_unrecognized_kinds_are_filtered_out() -> None:
    report = scan_type(Annotated, {Action})

    assert report.type_records == ()
    assert [f.operation_name for f in report.findings] == ["mixed", "static", "build"]
    assert all(f.kinds() == ("Action",) for f in report.findings)
    assert report.finding("hidden_only") is None


def test_all_recognized_kinds_are_collected() -> None:
    report = scan_type(Annotated, [Hidden, Action, Service])

    assert [r.kind for r in report.type_records] == ["Service", "test_scanner.Hidden"]
    assert [f.operation_name for f in report.findings] == ["hidden_only", "mixed", "static", "build"]
    mixed = report.finding("mixed")
    assert mixed is not None
    assert mixed.kinds() == ("Action", "test_scanner.Hidden")
    assert report.finding("static").get("Action")[0]["priority"] == 5  # type: ignore[union-attr]


def test_kind_order_follows_registration_not_argument_order() -> None:
    a = resolve_kinds([Late, Hidden, Action])
    b = resolve_kinds({Action, Late, Hidden})
    assert a == b
    orders = [kind_registry.order_of(k.name) for k in a]
    assert orders == sorted(orders)


def test_scan_is_idempotent_and_does_not_mutate() -> None:
    before = dict(vars(OrderService))
    first = scan_type(OrderService, {Service, Action, DeprecatedFeature})
    second = scan_type(OrderService, {Service, Action, DeprecatedFeature})

    assert first == second
    assert dict(vars(OrderService)) == before


def test_declared_operations_skip_properties_and_inherited_members() -> None:
    class Child(Annotated):
        def extra(self) -> None: ...

    ops = TypeDescriptor(Annotated).declared_operations()
    assert [op.name for op in ops] == ["hidden_only", "mixed", "static", "build"]
    assert [op.name for op in TypeDescriptor(Child).declared_operations()] == ["extra"]


def test_inherited_service_is_reported_for_subclass() -> None:
    class SpecialOrderService(OrderService):
        def ship(self) -> None: ...

    report = scan_type(SpecialOrderService, {Service, Action})

    assert report.type_level_record is not None
    assert report.type_level_record["name"] == "OrderService"
    assert report.findings == ()


def test_target_can_be_given_as_import_path() -> None:
    by_colon = scan_type("metascan.demos.services:OrderService", {Action})
    by_dots = scan_type("metascan.demos.services.OrderService", {Action})

    assert by_colon == by_dots == scan_type(OrderService, {Action})


@pytest.mark.parametrize(
    "target",
    [
        None,
        42,
        "metascan.demos.services:Missing",
        "metascan.demos.nowhere.OrderService",
        "no_such_package_for_metascan.Thing",
        "OrderService",
        "metascan.demos.services:OrderService.process_order",
        ".demos.services.OrderService",
        ".x.Y",
    ],
)
def test_unresolvable_target_raises_not_found(target: object) -> None:
    with pytest.raises(NotFoundError):
        scan_type(target, {Action})  # type: ignore[arg-type]


def test_unknown_kind_name_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        scan_type(OrderService, {"NoSuchKind"})


def test_single_kind_name_is_accepted() -> None:
    report = scan_type(OrderService, "DeprecatedFeature")
    assert [f.operation_name for f in report.findings] == ["cancel_order"]


def test_resolve_type_returns_descriptor() -> None:
    descriptor = resolve_type(OrderService)
    assert descriptor.cls is OrderService
    assert descriptor.name == "OrderService"


class _Base:
    def run(self) -> None: ...

    def __str__(self) -> str:
        return "base"


def test_builtin_markers_are_scanned_as_kinds() -> None:
    class Child(_Base):
        @override
        def run(self) -> None: ...

        @override
        @Action(description="both")
        def __str__(self) -> str:
            return "child"

        @warnings.deprecated("gone")
        def old(self) -> None: ...

    report = scan_type(Child, ("override", "deprecated", Action))

    assert [f.operation_name for f in report.findings] == ["run", "__str__", "old"]
    assert report.finding("run").kinds() == ("override",)  # type: ignore[union-attr]
    assert set(report.finding("__str__").kinds()) == {"override", "Action"}  # type: ignore[union-attr]
    (record,) = report.finding("old").get("deprecated")  # type: ignore[union-attr]
    assert record["message"] == "gone"


def test_deprecated_class_is_a_type_level_record() -> None:
    @warnings.deprecated("use New")
    class Old:
        def run(self) -> None: ...

    assert [op.name for op in TypeDescriptor(Old).declared_operations()] == ["run"]
    report = scan_type(Old, {"deprecated"})
    assert report.findings == ()
    assert report.type_level_record is not None
    assert report.type_level_record["message"] == "use New"

    with pytest.warns(DeprecationWarning):

        class Newer(Old):
            pass

    assert scan_type(Newer, {"deprecated"}).type_level_record is None


def test_deprecated_class_keeps_hooks_declared_in_its_body() -> None:
    @warnings.deprecated("use Modern")
    class Legacy:
        @Action(description="subclass hook")
        def __init_subclass__(cls, **kwargs: object) -> None:
            super().__init_subclass__(**kwargs)

        def run(self) -> None: ...

    ops = TypeDescriptor(Legacy).declared_operations()
    assert [op.name for op in ops] == ["__init_subclass__", "run"]

    report = scan_type(Legacy, {Action, "deprecated"})
    assert [f.operation_name for f in report.findings] == ["__init_subclass__"]
    assert report.findings[0].kinds() == ("Action",)
