"""Architectural boundary tests using pytest-archon.

These tests keep the ports-and-adapters layering intact:
- Domain layer has no dependencies on application or adapters
- Application services don't depend on adapters
- Adapters don't depend on application services
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models should only import the standard library, pydantic and each other."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("delivery_tracking.domain.models*")
        .should_not_import("delivery_tracking.adapters*")
        .should_not_import("delivery_tracking.application*")
        .should_not_import("delivery_tracking.domain.contracts*")
        .should_not_import("delivery_tracking.domain.ports*")
        .may_import("delivery_tracking.domain.models*")
        .check("delivery_tracking")
    )


def test_domain_contracts_have_no_dependencies() -> None:
    """Domain contracts (protocols) should not import adapters or application."""
    (
        archrule("domain contracts", comment="Domain contracts should be independent")
        .match("delivery_tracking.domain.contracts*")
        .should_not_import("delivery_tracking.adapters*")
        .should_not_import("delivery_tracking.application*")
        .may_import("delivery_tracking.domain*")
        .check("delivery_tracking")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Repository and token store ports should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("delivery_tracking.domain.ports*")
        .should_not_import("delivery_tracking.adapters*")
        .should_not_import("delivery_tracking.application*")
        .may_import("delivery_tracking.domain*")
        .check("delivery_tracking")
    )


def test_application_services_dont_import_adapters() -> None:
    """Tracking and order list services should only see the realtime session and repositories as protocols."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("delivery_tracking.application*")
        .should_not_import("delivery_tracking.adapters*")
        .may_import("delivery_tracking.domain*")
        .may_import("delivery_tracking.application*")
        .check("delivery_tracking")
    )


def test_adapters_dont_import_application() -> None:
    """Socket.IO, HTTP and auth adapters should not import application services."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("delivery_tracking.adapters*")
        .should_not_import("delivery_tracking.application*")
        .may_import("delivery_tracking.domain*")
        .may_import("delivery_tracking.adapters*")
        .check("delivery_tracking", only_direct_imports=True)
    )
