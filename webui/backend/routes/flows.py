"""Single round-trip generation routes."""
from __future__ import annotations

from litestar import post
from litestar.status_codes import HTTP_200_OK

from karigar.authenticity import authenticate_design
from karigar.chat import chat
from karigar.imagegen import generate_product_image
from karigar.pricing import predict_price
from karigar.sales import suggest_sales_strategy
from karigar.storygen import generate_product_stories
from schemas.authenticity import AuthenticationInput, AuthenticationResult
from schemas.chat import ChatReply, ChatRequest
from schemas.media import GeneratedImage, ImageRequest
from schemas.pricing import PriceInput, PricePrediction
from schemas.sales import SalesStrategy, SalesStrategyInput
from schemas.story import ProductStories, StoryInput

from webui.backend.deps import ConfigDep, ProviderDep


@post("/api/images", status_code=HTTP_200_OK, sync_to_thread=True)
def create_image(data: ImageRequest, provider: ProviderDep, config: ConfigDep) -> GeneratedImage:
    return generate_product_image(data, provider, config)


@post("/api/stories", status_code=HTTP_200_OK, sync_to_thread=True)
def create_stories(data: StoryInput, provider: ProviderDep, config: ConfigDep) -> ProductStories:
    return generate_product_stories(data, provider, config)


@post("/api/price", status_code=HTTP_200_OK, sync_to_thread=True)
def price(data: PriceInput, provider: ProviderDep, config: ConfigDep) -> PricePrediction:
    return predict_price(data, provider, config)


@post("/api/authenticate", status_code=HTTP_200_OK, sync_to_thread=True)
def authenticate(data: AuthenticationInput, provider: ProviderDep, config: ConfigDep) -> AuthenticationResult:
    return authenticate_design(data, provider, config)


@post("/api/sales-strategy", status_code=HTTP_200_OK, sync_to_thread=True)
def sales_strategy(data: SalesStrategyInput, provider: ProviderDep) -> SalesStrategy:
    return suggest_sales_strategy(data, provider)


@post("/api/chat", status_code=HTTP_200_OK, sync_to_thread=True)
def chat_turn(data: ChatRequest, provider: ProviderDep, config: ConfigDep) -> ChatReply:
    return chat(data, provider, config)
