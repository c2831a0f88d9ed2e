from typing import Optional

import pytest
import strawberry
from graphql import GraphQLNonNull, GraphQLObjectType

from resolverql import GraphQLResolver, Loader, MetadataError, ResolverQLConfig, Service, query
from resolverql.inference import type_name_of
from resolverql.strawberry_types import is_strawberry_type, to_graphql_type_map, to_graphql_types


@strawberry.type
class Author:
    full_name: str


@strawberry.type
class Book:
    title: str
    page_count: int
    author: Optional[Author] = None


@strawberry.input
class BookFilter:
    title: str


class LibraryResolver(GraphQLResolver):
    def get_types(self, loader):
        return [Book, Author]

    @query("book", "Book")
    def book(self, title: str) -> Book:
        return Book(title=title, page_count=412, author=Author(full_name="Frank Herbert"))


@strawberry.type
class Review:
    stars: int
    reviewer: Author


class AuthorResolver(GraphQLResolver):
    def get_types(self, loader):
        return [Author]

    @query("author", "Author")
    def author(self, name: str) -> Author:
        return Author(full_name=name)


class ReviewResolver(GraphQLResolver):
    def get_types(self, loader):
        return [Review]

    @query("review", "Review")
    def review(self) -> Review:
        return Review(stars=5, reviewer=Author(full_name="Ada"))


class ShelfResolver(GraphQLResolver):
    def get_types(self, loader):
        return [Book]

    @query("firstAuthor", "Author")
    def first_author(self) -> Author:
        return Author(full_name="Ursula K. Le Guin")


def test_detects_strawberry_types():
    assert is_strawberry_type(Book)
    assert not is_strawberry_type(Book(title="x", page_count=1))
    assert not is_strawberry_type(dict)
    assert type_name_of(Book) == "Book"


def test_batch_conversion_shares_types():
    book, author = to_graphql_types([Book, Author], ResolverQLConfig().to_strawberry_config())
    assert isinstance(book, GraphQLObjectType)
    assert book.name == "Book"
    assert author.name == "Author"
    assert book.fields["author"].type is author
    assert str(book.fields["page_count"].type) == "Int!"


def test_input_types_are_rejected():
    with pytest.raises(MetadataError):
        to_graphql_types([BookFilter])


def test_resolver_can_contribute_strawberry_types():
    loader = Loader()
    loader.register_resolver(LibraryResolver())
    service = Service(loader)

    res = service.process_query('{ book(title: "Dune") { title page_count author { full_name } } }')

    assert res == {"data": {"book": {"title": "Dune", "page_count": 412, "author": {"full_name": "Frank Herbert"}}}}


def test_camel_case_applies_to_strawberry_fields():
    loader = Loader(ResolverQLConfig(auto_camel_case=True))
    loader.register_resolver(LibraryResolver())
    service = Service(loader)

    res = service.process_query('{ book(title: "Dune") { pageCount author { fullName } } }')

    assert res == {"data": {"book": {"pageCount": 412, "author": {"fullName": "Frank Herbert"}}}}


def test_type_map_includes_reached_types():
    type_map = to_graphql_type_map([Book])
    assert set(type_map) == {"Book", "Author"}
    assert type_map["Book"].fields["author"].type is type_map["Author"]


def test_types_shared_between_resolvers_stay_one_instance():
    loader = Loader()
    loader.register_resolver(LibraryResolver())
    loader.register_resolver(AuthorResolver())
    loader.register_resolver(ReviewResolver())
    service = Service(loader)

    author = loader.get_type_by_name("Author")
    assert loader.get_type_by_name("Book").fields["author"].type is author
    reviewer = loader.get_type_by_name("Review").fields["reviewer"].type
    assert isinstance(reviewer, GraphQLNonNull) and reviewer.of_type is author

    res = service.process_query(
        '{ book(title: "Dune") { author { full_name } } author(name: "Ada") { full_name }'
        " review { stars reviewer { full_name } } }"
    )

    assert res == {
        "data": {
            "book": {"author": {"full_name": "Frank Herbert"}},
            "author": {"full_name": "Ada"},
            "review": {"stars": 5, "reviewer": {"full_name": "Ada"}},
        }
    }


def test_reached_types_are_registered():
    loader = Loader()
    loader.register_resolver(ShelfResolver())
    assert "Author" in loader.registry

    res = Service(loader).process_query("{ firstAuthor { full_name } }")

    assert res == {"data": {"firstAuthor": {"full_name": "Ursula K. Le Guin"}}}


def test_rejected_batch_does_not_poison_later_batches():
    loader = Loader()
    with pytest.raises(MetadataError):
        loader.register_types([BookFilter])
    loader.register_types([Author])
    assert list(loader.registry) == ["Author"]
