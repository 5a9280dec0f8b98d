"""Basic import and smoke tests."""


def test_can_import_parallai() -> None:
    """Test that the main package can be imported."""
    import parallai

    assert parallai is not None, "parallai package cannot be imported"


def test_can_import_core_modules() -> None:
    """Test that core modules can be imported."""
    from parallai.core import artifacts, fanout, marshal, models, transport

    assert all(
        [artifacts, fanout, marshal, models, transport]
    ), "Core modules cannot be imported"


def test_can_import_api_modules() -> None:
    """Test that endpoint modules can be imported."""
    from parallai.api import audio, chat, completion, edit, embedding, file, fine_tune, image
    from parallai.api import model, moderation

    assert all(
        [audio, chat, completion, edit, embedding, file, fine_tune, image, model, moderation]
    ), "API modules cannot be imported"
