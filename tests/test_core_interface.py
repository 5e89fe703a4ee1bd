"""
Unit Tests for core.interface module.

Tests IAppModule abstract interface and implementations.
"""

import pytest
from abc import ABC


class TestIAppModuleInterface:
    """Tests for IAppModule abstract interface."""

    def test_iappmodule_is_abstract(self):
        """Test IAppModule is an abstract class."""
        from core.interface import IAppModule

        assert issubclass(IAppModule, ABC)

    def test_cannot_instantiate_directly(self):
        """Test IAppModule cannot be instantiated directly."""
        from core.interface import IAppModule

        with pytest.raises(TypeError):
            IAppModule()

    def test_abstract_methods_defined(self):
        """Test required abstract methods are defined."""
        from core.interface import IAppModule

        assert IAppModule.__abstractmethods__ == frozenset({"get_module_name", "on_entry"})


class TestMinimalImplementation:
    """Tests for the default behaviour of optional hooks."""

    @pytest.fixture
    def minimal_module(self):
        from core.interface import IAppModule

        class MinimalModule(IAppModule):
            def get_module_name(self) -> str:
                return "minimal"

            def on_entry(self, context) -> None:
                self.context = context

        return MinimalModule()

    def test_can_create_minimal_implementation(self, minimal_module, app_context):
        minimal_module.on_entry(app_context)

        assert minimal_module.get_module_name() == "minimal"
        assert minimal_module.context is app_context

    def test_get_api_router_defaults_to_none(self, minimal_module):
        assert minimal_module.get_api_router() is None

    def test_get_status_default(self, minimal_module):
        assert minimal_module.get_status() == {"status": "active", "details": {}}

    def test_on_shutdown_default_is_noop(self, minimal_module):
        assert minimal_module.on_shutdown() is None

    def test_can_override_optional_methods(self):
        from fastapi import APIRouter

        from core.interface import IAppModule

        router = APIRouter(prefix="/custom")

        class CustomModule(IAppModule):
            def get_module_name(self) -> str:
                return "custom"

            def on_entry(self, context) -> None:
                pass

            def get_api_router(self):
                return router

            def get_status(self) -> dict:
                return {"status": "warning", "details": {"reason": "test"}}

        module = CustomModule()

        assert module.get_api_router() is router
        assert module.get_status()["status"] == "warning"
