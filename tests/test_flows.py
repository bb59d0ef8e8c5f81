import pytest
from pydantic import ValidationError

from conftest import FakeProvider, png_bytes
from karigar.authenticity import authenticate_design
from karigar.imagegen import generate_placeholder_image, generate_product_image, placeholder_product_image
from karigar.media import parse_data_uri
from karigar.pricing import format_number, predict_price
from karigar.sales import suggest_sales_strategy
from schemas.authenticity import AuthenticationInput, AuthenticationResult
from schemas.media import ImageRequest
from schemas.pricing import PriceInput, PricePrediction
from schemas.sales import SalesStrategy, SalesStrategyInput

PREDICTION = PricePrediction(
    price_range={"min": 2400.5, "max": 3100},
    breakdown={"material_cost": 400, "labor_cost": 1800, "artistic_premium": 250.75},
    market_comparison="Competitive with similar hand-painted bowls on Etsy.",
)


def test_price_inputs_forwarded_unmodified(config, image_uri):
    provider = FakeProvider(structured=PREDICTION)
    request = PriceInput(
        product_image_uri=image_uri,
        product_description="Hand-painted ceramic bowl",
        crafting_time=6,
        material_cost=400,
        skill_level="Intermediate",
    )
    result = predict_price(request, provider, config)

    assert result is PREDICTION
    _, prompt, schema, media = provider.calls_of("structured")[0]
    assert schema is PricePrediction
    assert "Crafting Time: 6 hours" in prompt
    assert "Material Cost: ₹400" in prompt
    assert "Skill Level: Intermediate" in prompt
    assert "Hand-painted ceramic bowl" in prompt
    assert media[0] == parse_data_uri(image_uri)


def test_price_result_numbers_untouched(config, image_uri):
    provider = FakeProvider(structured=PREDICTION)
    request = PriceInput(
        product_image_uri=image_uri,
        product_description="Bowl",
        crafting_time=6,
        material_cost=400,
        skill_level="Intermediate",
    )
    result = predict_price(request, provider, config)
    assert result.price_range.min == 2400.5
    assert result.breakdown.artistic_premium == 250.75


def test_price_prompt_keeps_full_precision(config, image_uri):
    provider = FakeProvider(structured=PREDICTION)
    request = PriceInput(
        product_image_uri=image_uri,
        product_description="Carved rosewood elephant",
        crafting_time=6.1234567,
        material_cost=1234567,
        skill_level="Expert",
    )
    predict_price(request, provider, config)
    prompt = provider.calls_of("structured")[0][1]
    assert "- Crafting Time: 6.1234567 hours" in prompt
    assert "- Material Cost: ₹1234567\n" in prompt


def test_format_number():
    assert format_number(400.0) == "400"
    assert format_number(2500000.0) == "2500000"
    assert format_number(0.1) == "0.1"
    assert format_number(12.3456789) == "12.3456789"


def test_price_input_validation():
    with pytest.raises(ValidationError):
        PriceInput(
            product_image_uri="data:image/png;base64,AA==",
            product_description="Bowl",
            crafting_time=-1,
            material_cost=400,
            skill_level="Intermediate",
        )
    with pytest.raises(ValidationError):
        PriceInput(
            product_image_uri="data:image/png;base64,AA==",
            product_description="Bowl",
            crafting_time=1,
            material_cost=400,
            skill_level="Master",
        )


def test_authenticate_design(config, image_uri):
    verdict = AuthenticationResult(
        is_authentic=True,
        cultural_origin="Warli Painting",
        confidence_score=0.92,
        report="Stick figures and circular dance motifs.",
        certificate_data={
            "artisan_name": "Jivya",
            "craft_name": "Warli",
            "date_of_authentication": "2024-05-01",
            "certificate_id": "KRG-0001",
        },
    )
    provider = FakeProvider(structured=verdict)
    result = authenticate_design(AuthenticationInput(design_image_uri=image_uri), provider, config)

    assert result is verdict
    _, prompt, schema, media = provider.calls_of("structured")[0]
    assert schema is AuthenticationResult
    assert "Artisan's Notes: None provided." in prompt
    assert len(media) == 1


def test_sales_strategy_prompt():
    strategy = SalesStrategy(suggested_strategy="Sell on Instagram", reasoning="Young buyers")
    provider = FakeProvider(structured=strategy)
    request = SalesStrategyInput(
        product_data="Handwoven silk sarees, ₹5000-₹15000",
        business_data="Revenue ₹2L/month, margin 20%",
        growth_rate=12.5,
        materials_used="Mulberry silk from Karnataka",
    )
    assert suggest_sales_strategy(request, provider) is strategy
    _, prompt, schema, media = provider.calls_of("structured")[0]
    assert schema is SalesStrategy
    assert "Growth Rate: 12.5%" in prompt
    assert "Mulberry silk from Karnataka" in prompt
    assert media == []


def test_sales_strategy_growth_rate_not_rounded():
    provider = FakeProvider(structured=SalesStrategy(suggested_strategy="s", reasoning="r"))
    request = SalesStrategyInput(
        product_data="Handwoven silk sarees",
        business_data="Revenue ₹2L/month",
        growth_rate=12.3456789,
        materials_used="Mulberry silk from Karnataka",
    )
    suggest_sales_strategy(request, provider)
    assert "Growth Rate: 12.3456789%" in provider.calls_of("structured")[0][1]


def test_sales_strategy_needs_detail():
    with pytest.raises(ValidationError):
        SalesStrategyInput(product_data="pots", business_data="small", growth_rate=1, materials_used="clay")


def test_product_image_text_only(config):
    provider = FakeProvider()
    request = ImageRequest(
        product_description="Blue pottery vase with floral motifs",
        style_preference="minimalist",
        view_preference="front",
    )
    result = generate_product_image(request, provider, config)

    assert parse_data_uri(result.image_data_uri).mime_type == "image/png"
    _, prompt, reference = provider.calls_of("image")[0]
    assert "style: minimalist, view: front" in prompt
    assert reference is None


def test_product_image_with_reference(config, image_uri):
    provider = FakeProvider()
    request = ImageRequest(
        product_description="Blue pottery vase with floral motifs",
        style_preference="rustic",
        view_preference="side",
        product_image_uri=image_uri,
    )
    generate_product_image(request, provider, config)
    assert provider.calls_of("image")[0][2].data == png_bytes()


def test_placeholder_image():
    image = generate_placeholder_image("A terracotta horse from Bankura", width=320, height=200)
    assert image.mime_type == "image/png"
    assert image.data.startswith(b"\x89PNG")

    request = ImageRequest(product_description="Dhokra brass figurine", style_preference="modern", view_preference="3D")
    assert placeholder_product_image(request).image_data_uri.startswith("data:image/png;base64,")
