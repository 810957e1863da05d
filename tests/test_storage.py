# =============================================================================
# tests/test_storage.py - Storage Layer Tests
# =============================================================================
# Covers DatabaseStorage against in-memory SQLite:
# - Category CRUD and uniqueness
# - Post listing / filtering / search ordering
# - isFree derivation on create and update
# - Atomic download counter
# - News articles and legacy users
# =============================================================================

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from marketplace.exceptions import ValidationError
from marketplace.extensions import db
from marketplace.schemas import PostUpdate, derive_is_free


def _age(post, minutes):
    """Backdate a post so ordering does not depend on insert speed."""
    post.created_at = datetime(2024, 1, 1) + timedelta(minutes=minutes)
    db.session.commit()


# =============================================================================
# Category Tests
# =============================================================================

class TestCategories:

    def test_create_then_get_by_id(self, store):
        category = store.create_category({'name': 'Textures', 'slug': 'textures'})

        fetched = store.get_category_by_id(category.id)

        assert category.id
        assert fetched.name == 'Textures'
        assert fetched.slug == 'textures'

    def test_get_by_slug(self, store):
        store.create_category({'name': 'Audio', 'slug': 'audio'})

        assert store.get_category_by_slug('audio').name == 'Audio'
        assert store.get_category_by_slug('missing') is None

    def test_duplicate_name_fails(self, store):
        store.create_category({'name': 'Games', 'slug': 'games'})

        with pytest.raises(ValidationError):
            store.create_category({'name': 'Games', 'slug': 'games-2'})

    def test_duplicate_slug_fails(self, store):
        store.create_category({'name': 'Games', 'slug': 'games'})

        with pytest.raises(ValidationError):
            store.create_category({'name': 'Other games', 'slug': 'games'})

    def test_session_usable_after_duplicate(self, store):
        store.create_category({'name': 'Games', 'slug': 'games'})
        with pytest.raises(ValidationError):
            store.create_category({'name': 'Games', 'slug': 'games'})

        store.create_category({'name': 'Books', 'slug': 'books'})

        assert len(store.get_categories()) == 2

    def test_missing_fields_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_category({'name': 'No slug'})
        with pytest.raises(ValidationError):
            store.create_category({'name': '  ', 'slug': 'blank'})

    def test_explicit_id(self, store):
        category = store.create_category({'name': 'Minecraft', 'slug': 'minecraft'}, category_id='minecraft')

        assert category.id == 'minecraft'

    def test_partial_update(self, store):
        category = store.create_category({'name': 'Models', 'slug': 'models'})

        updated = store.update_category(category.id, {'name': '3D Models'})

        assert updated.name == '3D Models'
        assert updated.slug == 'models'

    def test_update_missing_returns_none(self, store):
        assert store.update_category('nope', {'name': 'X'}) is None

    def test_delete(self, store, make_post):
        category = store.create_category({'name': 'Temp', 'slug': 'temp'})
        post = make_post(category_id=category.id)

        assert store.delete_category(category.id) is True
        assert store.get_category_by_id(category.id) is None
        assert store.delete_category(category.id) is False
        # soft reference: posts keep the dangling id
        assert store.get_post_by_id(post.id).category_id == category.id


# =============================================================================
# Post Tests
# =============================================================================

class TestPosts:

    def test_create_defaults(self, make_post):
        post = make_post()

        assert post.id
        assert post.created_at is not None
        assert post.download_count == '0'
        assert post.images == []
        assert post.download_files == []

    @pytest.mark.parametrize('price, is_free', [
        ('0', True),
        ('0.00', True),
        ('', True),
        (None, True),
        (0, True),
        ('9.99', False),
    ])
    def test_is_free_derived_from_price(self, make_post, price, is_free):
        post = make_post(price=price)

        assert post.is_free is is_free

    def test_negative_price_rejected(self, make_post):
        with pytest.raises(ValidationError):
            make_post(price='-1')

    def test_invalid_price_rejected(self, make_post):
        with pytest.raises(ValidationError):
            make_post(price='abc')

    def test_missing_title_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_post({'description': 'd', 'category_id': 'cat-a'})

    def test_camel_case_input_accepted(self, store):
        post = store.create_post({
            'title': 'Map pack',
            'description': 'Custom maps',
            'categoryId': 'warcraft-3',
            'downloadFiles': [{'name': 'maps.zip', 'url': '/uploads/1-maps.zip', 'size': 42}],
        })

        assert post.category_id == 'warcraft-3'
        assert post.download_files == [{'name': 'maps.zip', 'url': '/uploads/1-maps.zip', 'size': 42}]

    def test_get_posts_filters_by_category_newest_first(self, make_post, store):
        older = make_post(title='Older', category_id='cat-a')
        other = make_post(title='Other', category_id='cat-b')
        newer = make_post(title='Newer', category_id='cat-a')
        _age(older, 1)
        _age(other, 2)
        _age(newer, 3)

        posts = store.get_posts('cat-a')

        assert [p.title for p in posts] == ['Newer', 'Older']
        assert all(p.category_id == 'cat-a' for p in posts)

    def test_get_posts_without_filter(self, make_post, store):
        first = make_post(title='First', category_id='cat-a')
        second = make_post(title='Second', category_id='cat-b')
        _age(first, 1)
        _age(second, 2)

        assert [p.title for p in store.get_posts()] == ['Second', 'First']

    def test_search_matches_title_or_description(self, make_post, store):
        model = make_post(title='Dragon Model', description='A low poly beast')
        racing = make_post(title='Car pack', description='Great for Drag racing fans')
        make_post(title='Castle', description='Medieval walls')
        _age(model, 1)
        _age(racing, 2)

        results = store.search_posts('drag')

        assert [p.title for p in results] == ['Car pack', 'Dragon Model']

    def test_search_treats_wildcards_literally(self, make_post, store):
        make_post(title='1000 textures')
        make_post(title='100% free sounds')

        results = store.search_posts('100%')

        assert [p.title for p in results] == ['100% free sounds']

    def test_partial_update_leaves_other_fields(self, make_post, store):
        post = make_post(title='Old title', price='5.00')

        updated = store.update_post(post.id, {'title': 'New title'})

        assert updated.title == 'New title'
        assert updated.description == 'Something to download'
        assert updated.price == Decimal('5.00')
        assert updated.is_free is False

    def test_update_price_recomputes_is_free(self, make_post, store):
        post = make_post(price='5.00')

        updated = store.update_post(post.id, PostUpdate(price='0'))

        assert updated.is_free is True

    def test_update_missing_returns_none(self, store):
        assert store.update_post('missing', {'title': 'x'}) is None

    def test_update_rejects_empty_title(self, make_post, store):
        post = make_post()

        with pytest.raises(ValidationError):
            store.update_post(post.id, {'title': ''})

    def test_delete(self, make_post, store):
        post = make_post()

        assert store.delete_post('does-not-exist') is False
        assert store.delete_post(post.id) is True
        assert store.get_post_by_id(post.id) is None

    def test_increment_download_count(self, make_post, store):
        post = make_post()
        post.download_count = '3'
        db.session.commit()

        assert store.increment_download_count(post.id) == '4'
        assert store.get_post_by_id(post.id).download_count == '4'

    def test_increment_repeatedly(self, make_post, store):
        post = make_post()

        for _ in range(5):
            store.increment_download_count(post.id)

        assert store.get_post_by_id(post.id).download_count == '5'

    def test_increment_missing_post(self, store):
        assert store.increment_download_count('missing') is None


class TestDeriveIsFree:

    @pytest.mark.parametrize('price, expected', [
        (None, True), ('', True), ('  ', True), ('0', True), (0, True),
        (Decimal('0.00'), True), ('0.01', False), ('abc', False),
    ])
    def test_values(self, price, expected):
        assert derive_is_free(price) is expected


# =============================================================================
# News Tests
# =============================================================================

class TestNewsArticles:

    def _article(self, store, **overrides):
        data = {'title': 'Patch notes', 'content': '<p>Body</p>', 'excerpt': 'Short'}
        data.update(overrides)
        return store.create_news_article(data)

    def test_create_without_image(self, store):
        article = self._article(store, image='')

        assert article.id
        assert article.image is None
        assert article.created_at is not None

    def test_missing_excerpt_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_news_article({'title': 't', 'content': 'c'})

    def test_list_newest_first(self, store):
        first = self._article(store, title='First')
        second = self._article(store, title='Second')
        first.created_at = datetime(2024, 1, 1)
        second.created_at = datetime(2024, 1, 2)
        db.session.commit()

        assert [a.title for a in store.get_news_articles()] == ['Second', 'First']

    def test_update_and_delete(self, store):
        article = self._article(store)

        updated = store.update_news_article(article.id, {'image': '/uploads/1-cover.png'})
        assert updated.image == '/uploads/1-cover.png'
        assert updated.title == 'Patch notes'

        assert store.update_news_article('missing', {'title': 'x'}) is None
        assert store.delete_news_article(article.id) is True
        assert store.delete_news_article(article.id) is False
        assert store.get_news_article_by_id(article.id) is None


# =============================================================================
# User Tests
# =============================================================================

class TestUsers:

    def test_create_and_lookup(self, store):
        user = store.create_user({'username': 'alice', 'password': 'secret'})

        assert store.get_user(user.id).username == 'alice'
        assert store.get_user_by_username('alice').id == user.id
        assert user.verify_password('secret')
        assert not user.verify_password('wrong')

    def test_duplicate_username(self, store):
        store.create_user({'username': 'alice', 'password': 'secret'})

        with pytest.raises(ValidationError):
            store.create_user({'username': 'alice', 'password': 'other'})

    def test_password_not_serialized(self, store):
        user = store.create_user({'username': 'bob', 'password': 'secret'})

        assert set(user.to_dict()) == {'id', 'username'}
