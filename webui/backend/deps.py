"""Dependency providers shared by the route handlers."""
from __future__ import annotations

from typing import Annotated

from litestar.datastructures import State
from litestar.exceptions import HTTPException
from litestar.params import Dependency

from karigar.config import Config
from karigar.provider import ModelProvider

# Injected objects are used as-is, not validated like request data
ProviderDep = Annotated[ModelProvider, Dependency(skip_validation=True)]
ConfigDep = Annotated[Config, Dependency(skip_validation=True)]


def provide_config(state: State) -> Config:
    if state.get("config") is None:
        state.config = Config.load()
    return state.config


def provide_model(state: State) -> ModelProvider:
    """The app's model provider, built from config on first use."""
    if state.get("provider") is None:
        from karigar.utils.gemini_client import GeminiProvider

        config = provide_config(state)
        if not config.gemini_api_key:
            raise HTTPException(status_code=503, detail="GEMINI_API_KEY is not set.")
        state.provider = GeminiProvider(config)
    return state.provider
