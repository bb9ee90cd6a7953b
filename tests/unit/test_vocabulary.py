"""Unit tests for vocabulary lookup."""

from app.models.template import SlotTemplate
from models.requirement import MediaType, Requirement
from resolvers.vocabulary import DEFAULT_VOCABULARY, snake_case, template_keywords, vocabulary_for


def test_snake_case() -> None:
    assert snake_case("backgroundMusic") == "background_music"
    assert snake_case("introImage") == "intro_image"


def test_template_override_wins(lullaby) -> None:
    assert vocabulary_for(lullaby.requirement("backgroundMusic"), lullaby) == (
        "lullaby", "bedtime", "calm", "peaceful", "soothing",
    )


def test_default_by_purpose_then_asset_class(name_video) -> None:
    assert vocabulary_for(name_video.requirement("backgroundMusic"), name_video) == DEFAULT_VOCABULARY["background_music"]
    by_class = Requirement(purpose="score", media_type=MediaType.MUSIC, asset_class="background_music")
    assert vocabulary_for(by_class) == DEFAULT_VOCABULARY["background_music"]
    assert vocabulary_for(Requirement(purpose="sticker", media_type=MediaType.IMAGE)) == ()


def test_template_keywords_fall_back_by_name() -> None:
    bare = SlotTemplate(
        name="letter-hunt",
        requirements=(Requirement(purpose="x", media_type=MediaType.IMAGE),),
    )
    assert "alphabet" in template_keywords(bare)
