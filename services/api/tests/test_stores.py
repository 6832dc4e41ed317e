"""Document stores: the same behavior from the SQLite and JSON backends."""
import pytest

from adapters.json import JsonDocumentStore
from adapters.sqlite import SqliteDocumentStore
from core.errors import DocumentNotFoundError
from models import DocumentType, ProductType


@pytest.fixture(params=["sqlite", "json"])
def any_store(request, tmp_path):
    if request.param == "sqlite":
        return SqliteDocumentStore.from_url(f"sqlite:///{tmp_path / 'db' / 'packets.db'}")
    return JsonDocumentStore(str(tmp_path / "json"))


def _create(store, name, product_type=ProductType.STRUCTURAL_FLOOR, **extra):
    fields = dict(
        name=name,
        filename=f"{name.lower()}.pdf",
        file_url=f"http://testserver/files/{name.lower()}.pdf",
        size=4096,
        type=DocumentType.TECHNICAL_DATA_SHEET,
        product_type=product_type,
    )
    fields.update(extra)
    return store.create_document(**fields)


def test_create_and_get(any_store):
    doc = _create(any_store, "TDS", description="TDS Document", required=True)

    fetched = any_store.get_document(doc.id)
    assert fetched == doc
    assert fetched.url == "http://testserver/files/tds.pdf"
    assert fetched.type is DocumentType.TECHNICAL_DATA_SHEET
    assert fetched.product_type is ProductType.STRUCTURAL_FLOOR
    assert fetched.required is True
    assert fetched.created_at is not None


def test_get_missing_returns_none(any_store):
    assert any_store.get_document("does-not-exist") is None


def test_listing_is_newest_first(any_store):
    first = _create(any_store, "First")
    second = _create(any_store, "Second")
    third = _create(any_store, "Third", product_type=ProductType.UNDERLAYMENT)

    assert [d.id for d in any_store.list_documents()] == [third.id, second.id, first.id]


def test_filter_by_product_type(any_store):
    floor = _create(any_store, "Floor")
    _create(any_store, "Underlay", product_type=ProductType.UNDERLAYMENT)

    assert [d.id for d in any_store.list_documents_by_product_type("structural-floor")] == [floor.id]
    assert [d.name for d in any_store.list_documents_by_product_type(ProductType.UNDERLAYMENT)] == [
        "Underlay"
    ]


def test_update_only_touches_editable_fields(any_store):
    doc = _create(any_store, "Warranty")

    updated = any_store.update_document(
        doc.id,
        {"name": "Limited Warranty", "type": DocumentType.WARRANTY, "file_url": "http://evil/x.pdf"},
    )

    assert updated.name == "Limited Warranty"
    assert updated.type is DocumentType.WARRANTY
    assert updated.url == doc.url
    assert updated.created_at == doc.created_at


def test_update_missing_raises(any_store):
    with pytest.raises(DocumentNotFoundError):
        any_store.update_document("nope", {"name": "x"})


def test_delete(any_store):
    doc = _create(any_store, "Gone")
    any_store.delete_document(doc.id)

    assert any_store.get_document(doc.id) is None
    with pytest.raises(DocumentNotFoundError):
        any_store.delete_document(doc.id)


def test_sqlite_catalog_cache_is_dropped_on_write(tmp_path):
    store = SqliteDocumentStore.from_url(f"sqlite:///{tmp_path / 'packets.db'}")
    _create(store, "One")
    assert len(store.list_documents_by_product_type(ProductType.STRUCTURAL_FLOOR)) == 1

    two = _create(store, "Two")
    assert [d.name for d in store.list_documents_by_product_type(ProductType.STRUCTURAL_FLOOR)] == [
        "Two",
        "One",
    ]

    store.delete_document(two.id)
    assert [d.name for d in store.list_documents_by_product_type(ProductType.STRUCTURAL_FLOOR)] == [
        "One"
    ]


def test_json_store_survives_reopen(tmp_path):
    data_dir = str(tmp_path / "json")
    doc = _create(JsonDocumentStore(data_dir), "Persisted")

    assert JsonDocumentStore(data_dir).get_document(doc.id) == doc


def test_unknown_stored_type_falls_back_to_tds(tmp_path):
    store = JsonDocumentStore(str(tmp_path / "json"))
    doc = _create(store, "Legacy")
    rows = store._read_file(store.documents_file)
    rows[0]["type"] = "structural-floor"
    store._write_file(store.documents_file, rows)

    assert store.get_document(doc.id).type is DocumentType.TECHNICAL_DATA_SHEET
