from .pricing import PriceInput, PricePrediction, PriceRange, PriceBreakdown
from .authenticity import AuthenticationInput, AuthenticationResult, CertificateData
from .sales import SalesStrategyInput, SalesStrategy
from .story import StoryInput, ProductStories, CraftStory
from .media import ImageRequest, GeneratedImage, VideoRequest
from .chat import ChatRequest, ChatReply, ChatTurn, ContentPart, MediaRef

__all__ = [
    "PriceInput", "PricePrediction", "PriceRange", "PriceBreakdown",
    "AuthenticationInput", "AuthenticationResult", "CertificateData",
    "SalesStrategyInput", "SalesStrategy",
    "StoryInput", "ProductStories", "CraftStory",
    "ImageRequest", "GeneratedImage", "VideoRequest",
    "ChatRequest", "ChatReply", "ChatTurn", "ContentPart", "MediaRef",
]
