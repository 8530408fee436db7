"""Repository behaviour against an in-memory database."""

import json

import pytest
from sqlalchemy.exc import IntegrityError

from novelcraft.core.exceptions import RowNotFoundError
from novelcraft.repositories import (
    ChapterRepository,
    ChapterVersionRepository,
    CharacterRepository,
    ProjectRepository,
    UserRepository,
    WorldBookRepository,
)


@pytest.fixture
def project(db, test_user):
    return ProjectRepository.create(db, user_id=test_user.id, title="My Novel")


class TestUserRepository:
    def test_lookup(self, db, test_user):
        assert UserRepository.get_by_id(db, test_user.id).username == "writer@example.com"
        assert UserRepository.get_by_username(db, "writer@example.com").id == test_user.id
        assert UserRepository.get_by_username(db, "nobody@example.com") is None

    def test_usernames_are_unique(self, db, test_user):
        with pytest.raises(IntegrityError):
            UserRepository.create(db, username="writer@example.com", password_hash="x")
        db.rollback()

    def test_update_last_login(self, db, test_user):
        assert test_user.last_login_at is None
        user = UserRepository.update_last_login(db, test_user.id)
        assert user.last_login_at is not None
        assert user.last_login_at.tzinfo is not None

    def test_update_missing_user(self, db):
        with pytest.raises(RowNotFoundError):
            UserRepository.update(db, 999, {"auth_method": "password"})

    def test_unknown_field_is_rejected(self, db, test_user):
        with pytest.raises(AttributeError):
            UserRepository.update(db, test_user.id, {"nickname": "w"})

    def test_passkey_switch(self, db, test_user):
        credential = json.dumps({"id": "cred-1", "public_key": "pk", "algorithm": "ES256"})

        UserRepository.update_to_passkey_auth(db, test_user.id, credential)
        assert UserRepository.uses_passkey_auth(db, test_user.id)
        assert UserRepository.get_passkey_credential(db, test_user.id) == credential
        assert UserRepository.get_by_credential_id(db, "cred-1").id == test_user.id
        assert UserRepository.get_by_credential_id(db, "cred") is None

        UserRepository.update_to_password_auth(db, test_user.id)
        assert not UserRepository.uses_passkey_auth(db, test_user.id)
        assert UserRepository.get_passkey_credential(db, test_user.id) is None


class TestProjectRepository:
    def test_create_defaults(self, project, test_user):
        assert project.user_id == test_user.id
        assert project.status == "active"
        assert project.current_chapter_id is None
        assert project.deleted_at is None
        assert project.created_at is not None

    def test_list_by_user_is_newest_first(self, db, test_user, other_user):
        first = ProjectRepository.create(db, user_id=test_user.id, title="First")
        second = ProjectRepository.create(db, user_id=test_user.id, title="Second")
        ProjectRepository.create(db, user_id=other_user.id, title="Not mine")

        projects = ProjectRepository.list_by_user(db, test_user.id)
        assert [p.id for p in projects] == [second.id, first.id]

    def test_update_stamps_updated_at(self, db, project):
        before = project.updated_at
        updated = ProjectRepository.update(db, project.id, {"title": "Renamed"})
        assert updated.title == "Renamed"
        assert updated.updated_at >= before

    def test_soft_delete_and_restore(self, db, test_user, project):
        ProjectRepository.soft_delete(db, project.id)

        assert ProjectRepository.get_by_id(db, project.id) is None
        assert ProjectRepository.list_by_user(db, test_user.id) == []
        assert ProjectRepository.get_by_id_including_deleted(db, project.id).is_deleted

        with pytest.raises(RowNotFoundError):
            ProjectRepository.update(db, project.id, {"title": "Ghost"})

        restored = ProjectRepository.restore(db, project.id)
        assert not restored.is_deleted
        assert ProjectRepository.get_by_id(db, project.id) is not None


class TestChapterRepository:
    def test_word_count_follows_content(self, db, project):
        chapter = ChapterRepository.create(db, project_id=project.id, title="One", content="你好世界")
        assert chapter.word_count == 4

        chapter = ChapterRepository.update(db, chapter.id, {"content": "Hello, world"})
        assert chapter.word_count == 12

        chapter = ChapterRepository.update(db, chapter.id, {"title": "Renamed"})
        assert chapter.word_count == 12

    def test_update_word_count_leaves_content(self, db, project):
        chapter = ChapterRepository.create(db, project_id=project.id, title="One", content="abc")
        chapter = ChapterRepository.update_word_count(db, chapter.id, "abcdef")
        assert chapter.word_count == 6
        assert chapter.content == "abc"

    def test_list_by_project_orders_by_order_index(self, db, project):
        late = ChapterRepository.create(db, project_id=project.id, title="Late", order_index=2)
        early = ChapterRepository.create(db, project_id=project.id, title="Early", order_index=1)
        deleted = ChapterRepository.create(db, project_id=project.id, title="Gone", order_index=0)
        ChapterRepository.soft_delete(db, deleted.id)

        chapters = ChapterRepository.list_by_project(db, project.id)
        assert [c.id for c in chapters] == [early.id, late.id]

    def test_restore(self, db, project):
        chapter = ChapterRepository.create(db, project_id=project.id, title="One")
        ChapterRepository.soft_delete(db, chapter.id)
        assert ChapterRepository.get_by_id(db, chapter.id) is None

        ChapterRepository.restore(db, chapter.id)
        assert ChapterRepository.get_by_id(db, chapter.id) is not None


class TestChapterVersionRepository:
    @pytest.fixture
    def chapter(self, db, project):
        return ChapterRepository.create(db, project_id=project.id, title="One")

    def add_versions(self, db, chapter_id, count):
        for number in range(1, count + 1):
            ChapterVersionRepository.create(
                db, chapter_id=chapter_id, version_number=number, content=f"draft {number}"
            )

    def test_listing_is_newest_first(self, db, chapter):
        self.add_versions(db, chapter.id, 3)
        versions = ChapterVersionRepository.list_by_chapter(db, chapter.id)
        assert [v.version_number for v in versions] == [3, 2, 1]
        assert ChapterVersionRepository.max_version_number(db, chapter.id) == 3

    def test_max_version_number_without_versions(self, db, chapter):
        assert ChapterVersionRepository.max_version_number(db, chapter.id) == 0

    def test_version_numbers_are_unique_per_chapter(self, db, chapter):
        self.add_versions(db, chapter.id, 1)
        with pytest.raises(IntegrityError):
            ChapterVersionRepository.create(
                db, chapter_id=chapter.id, version_number=1, content="again"
            )
        db.rollback()

    def test_cleanup_removes_exactly_one_oldest_version(self, db, chapter):
        self.add_versions(db, chapter.id, 11)

        assert ChapterVersionRepository.cleanup_old_versions(db, chapter.id) == 1
        assert ChapterVersionRepository.count_by_chapter(db, chapter.id) == 10

        assert ChapterVersionRepository.cleanup_old_versions(db, chapter.id) == 1
        assert ChapterVersionRepository.count_by_chapter(db, chapter.id) == 9

        remaining = ChapterVersionRepository.list_by_chapter(db, chapter.id)
        assert [v.version_number for v in remaining] == list(range(11, 2, -1))

    def test_cleanup_without_versions(self, db, chapter):
        assert ChapterVersionRepository.cleanup_old_versions(db, chapter.id) == 0


class TestCharacterRepository:
    def test_crud(self, db, project):
        character = CharacterRepository.create(
            db,
            project_id=project.id,
            name="Lin",
            description="The protagonist",
            tags=["hero", "swordsman"],
        )
        assert character.tags == ["hero", "swordsman"]

        character = CharacterRepository.update(db, character.id, {"alias": "Little Lin"})
        assert character.alias == "Little Lin"
        assert [c.id for c in CharacterRepository.list_by_project(db, project.id)] == [character.id]

        CharacterRepository.soft_delete(db, character.id)
        assert CharacterRepository.get_by_id(db, character.id) is None
        assert CharacterRepository.list_by_project(db, project.id) == []

        CharacterRepository.restore(db, character.id)
        assert CharacterRepository.get_by_id(db, character.id) is not None


class TestWorldBookRepository:
    def test_upsert_keeps_one_row_per_project(self, db, project):
        assert WorldBookRepository.get_by_project(db, project.id) is None

        first = WorldBookRepository.upsert(db, project.id, content="Magic is rare")
        second = WorldBookRepository.upsert(
            db, project.id, content="Magic is common", outline={"acts": 3}
        )

        assert second.id == first.id
        stored = WorldBookRepository.get_by_project(db, project.id)
        assert stored.content == "Magic is common"
        assert stored.outline == {"acts": 3}
