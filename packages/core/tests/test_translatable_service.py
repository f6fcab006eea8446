"""Integration tests for TranslatableService against a real database."""

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from glossa_core.schemas import LanguageContext
from glossa_core.services import TranslatableService


def _owned_by(behavior, owner_id):
    return getattr(behavior.shadow, behavior.config.localized_foreign_key) == owner_id


async def _shadow_rows(session, behavior, owner_id):
    shadow = behavior.shadow
    result = await session.execute(
        select(shadow).where(_owned_by(behavior, owner_id)).order_by(shadow.language)
    )
    return result.scalars().all()


async def _count_shadow_rows(session, behavior, owner_id):
    result = await session.execute(
        select(func.count()).select_from(behavior.shadow).where(_owned_by(behavior, owner_id))
    )
    return result.scalar_one()


@pytest.fixture
def service(db_session, make_behavior, english):
    return TranslatableService(db_session, make_behavior(), english)


class TestScenario:
    """End-to-end: create, translate, save, reload in both modes."""

    @pytest.mark.asyncio
    async def test_create_translate_save_reload(self, service):
        post = service.new(title="Hello")
        bridge = service.behavior.bridge(post)
        assert bridge.get("title_en") == ""
        assert bridge.get("title_fr") == ""

        bridge.set("title_fr", "Bonjour")
        await service.save(post)

        loaded = await service.get(post.id, multilang=True)
        bridge = service.behavior.bridge(loaded)
        assert bridge.get("title_en") == "Hello"
        assert bridge.get("title_fr") == "Bonjour"

        localized = await service.get(post.id, language="fr")
        assert localized.title == "Bonjour"

    @pytest.mark.asyncio
    async def test_one_off_language_is_reset(self, service):
        post = service.new(title="Hello")
        service.behavior.bridge(post).set("title_fr", "Bonjour")
        await service.save(post)

        await service.get(post.id, language="fr")
        again = await service.get(post.id)

        assert again.title == "Hello"

    @pytest.mark.asyncio
    async def test_unknown_language_falls_back_to_current(self, service):
        post = service.new(title="Hello")
        service.behavior.bridge(post).set("title_fr", "Bonjour")
        await service.save(post)

        loaded = await service.get(post.id, language="de")

        assert loaded.title == "Hello"

    @pytest.mark.asyncio
    async def test_context_language_drives_localized_load(
        self, db_session, make_behavior, english
    ):
        behavior = make_behavior()
        writer = TranslatableService(db_session, behavior, english)
        post = writer.new(title="Hello")
        writer.behavior.bridge(post).set("title_fr", "Bonjour")
        await writer.save(post)

        reader = TranslatableService(db_session, behavior, LanguageContext(language="fr"))

        loaded = await reader.get(post.id)

        assert loaded.title == "Bonjour"

    @pytest.mark.asyncio
    async def test_requests_do_not_share_language(self, db_session, post_behavior, english):
        english_service = TranslatableService(db_session, post_behavior, english)
        french_service = TranslatableService(
            db_session, post_behavior, LanguageContext(language="fr")
        )
        post = english_service.new(title="Hello")
        post_behavior.bridge(post).set("title_fr", "Bonjour")
        await english_service.save(post)

        assert (await french_service.get(post.id)).title == "Bonjour"
        assert (await english_service.get(post.id)).title == "Hello"
        assert (await french_service.get(post.id, language="en")).title == "Hello"
        assert (await english_service.get(post.id)).title == "Hello"
        assert (await french_service.get(post.id)).title == "Bonjour"


class TestSave:
    """Test shadow row fan-out."""

    @pytest.mark.asyncio
    async def test_one_row_per_language(self, db_session, service):
        post = service.new(title="Hello", content="Body")
        await service.save(post)

        rows = await _shadow_rows(db_session, service.behavior, post.id)

        assert [row.language for row in rows] == ["en", "fr"]
        assert rows[0].localized_title == "Hello"
        assert rows[0].localized_content == "Body"
        assert rows[1].localized_title == ""

    @pytest.mark.asyncio
    async def test_resave_updates_in_place(self, db_session, service):
        post = service.new(title="Hello")
        await service.save(post)

        bridge = service.behavior.bridge(post)
        post.title = "Hi"
        bridge.set("title_fr", "Salut")
        await service.save(post)

        rows = await _shadow_rows(db_session, service.behavior, post.id)
        assert len(rows) == 2
        assert {row.language: row.localized_title for row in rows} == {"en": "Hi", "fr": "Salut"}

    @pytest.mark.asyncio
    async def test_round_trip_every_language(self, service):
        post = service.new(title="Hello", content="Body")
        bridge = service.behavior.bridge(post)
        bridge.set("title_fr", "Bonjour")
        bridge.set("content_fr", "Corps")
        await service.save(post)

        loaded = await service.get(post.id, multilang=True)

        assert service.behavior.bridge(loaded).as_dict() == {
            "title": {"en": "Hello", "fr": "Bonjour"},
            "content": {"en": "Body", "fr": "Corps"},
        }

    @pytest.mark.asyncio
    async def test_missing_translation_does_not_block_save(self, db_session, service):
        post = service.new(title="Hello")

        await service.save(post)

        assert await _count_shadow_rows(db_session, service.behavior, post.id) == 2

    @pytest.mark.asyncio
    async def test_required_primary_field_blocks_save(self, db_session, service):
        post = service.new()

        with pytest.raises(ValidationError):
            await service.save(post)

        result = await db_session.execute(select(func.count()).select_from(service.model))
        assert result.scalar_one() == 0

    @pytest.mark.asyncio
    async def test_forced_required_translation_blocks_save(
        self, db_session, make_behavior, english
    ):
        service = TranslatableService(db_session, make_behavior(force_overwrite=True), english)
        post = service.new(title="Hello")
        service.behavior.bridge(post).set("title_en", "Hello")

        with pytest.raises(ValidationError):
            await service.save(post)

    @pytest.mark.asyncio
    async def test_save_without_validation(self, db_session, service):
        post = service.new()

        await service.save(post, validate=False)

        assert await _count_shadow_rows(db_session, service.behavior, post.id) == 2


class TestLocalizedOverlay:
    """Test overwrite policy when loading one language."""

    async def _saved_post(self, service):
        post = service.new(title="Hello", content="Body")
        service.behavior.bridge(post).set("title_fr", "Bonjour")
        await service.save(post)
        return post

    @pytest.mark.asyncio
    async def test_empty_translation_keeps_primary_value(self, service):
        post = await self._saved_post(service)

        loaded = await service.get(post.id, language="fr")

        assert loaded.title == "Bonjour"
        assert loaded.content == "Body"

    @pytest.mark.asyncio
    async def test_forced_overwrite_applies_empty_translation(
        self, db_session, make_behavior, english
    ):
        service = TranslatableService(db_session, make_behavior(force_overwrite=True), english)
        post = service.new(title="Hello", content="Body")
        bridge = service.behavior.bridge(post)
        bridge.set("title_en", "Hello")
        bridge.set("title_fr", "Bonjour")
        await service.save(post)

        loaded = await service.get(post.id, language="fr")

        assert loaded.title == "Bonjour"
        assert loaded.content == ""

    @pytest.mark.asyncio
    async def test_overlay_is_not_written_back(self, db_session, service):
        post = await self._saved_post(service)
        await service.get(post.id, language="fr")

        await db_session.flush()
        result = await db_session.execute(
            select(service.model.title).where(service.model.id == post.id)
        )

        assert result.scalar_one() == "Hello"


class TestQueries:
    """Test find_all and search."""

    @pytest.mark.asyncio
    async def test_find_all_applies_translations(self, service):
        for title, title_fr in (("One", "Un"), ("Two", "Deux")):
            post = service.new(title=title)
            service.behavior.bridge(post).set("title_fr", title_fr)
            await service.save(post)

        posts = await service.find_all(language="fr")

        assert sorted(p.title for p in posts) == ["Deux", "Un"]

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, service):
        assert await service.get("missing", language="fr") is None

    @pytest.mark.asyncio
    async def test_search_translated_value(self, service):
        post = service.new(title="Hello")
        service.behavior.bridge(post).set("title_fr", "Bonjour")
        await service.save(post)
        other = service.new(title="Bye")
        await service.save(other)

        found = await service.search("title", "Bonjour", language="fr")

        assert [p.id for p in found] == [post.id]
        assert found[0].title == "Bonjour"

    @pytest.mark.asyncio
    async def test_search_any_language(self, service):
        post = service.new(title="Hello")
        await service.save(post)

        found = await service.search("title", "Hello", multilang=True)

        assert [p.id for p in found] == [post.id]
        assert service.behavior.bridge(found[0]).get("title_en") == "Hello"


class TestDelete:
    """Test shadow row removal on delete."""

    @pytest.mark.asyncio
    async def test_force_delete_removes_rows(self, db_session, service):
        post = service.new(title="Hello")
        await service.save(post)
        post_id = post.id

        await service.delete(post)

        assert await _count_shadow_rows(db_session, service.behavior, post_id) == 0
        assert await service.get(post_id) is None

    @pytest.mark.asyncio
    async def test_rows_left_without_force_delete(self, db_session, memo_behavior, english):
        service = TranslatableService(db_session, memo_behavior, english)
        memo = service.new(body="Call back")
        memo_behavior.bridge(memo).set("body_fr", "Rappeler")
        await service.save(memo)
        memo_id = memo.id

        await service.delete(memo)

        assert await service.get(memo_id) is None
        rows = await _shadow_rows(db_session, memo_behavior, memo_id)
        assert [row.localized_body for row in rows] == ["Call back", "Rappeler"]
