import json

import pytest

from heritage_catalog.exceptions import ContentValidationError, DatabaseError, EntityNotFoundError
from heritage_catalog.observability.metrics import query_fallback_count
from heritage_catalog.services.content_store import ContentStore


class DummyTransaction:
    def __init__(self, conn):
        self._conn = conn

    async def __aenter__(self):
        self._conn.transactions += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self._conn.rolled_back = True
        return False


class DummyConnection:
    def __init__(self, *, rows=None, row=None, returning=None):
        self.rows = rows or []
        self.row = row
        self.returning = returning
        self.calls = []
        self.transactions = 0
        self.rolled_back = False

    async def fetch(self, sql, *args):
        self.calls.append((sql, args))
        return self.rows

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if sql.startswith("SELECT"):
            return self.row
        return self.returning

    def transaction(self):
        return DummyTransaction(self)


class DummyAcquire:
    def __init__(self, conn):
        self._conn = conn

    async def __aenter__(self):
        return self._conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


class DummyPool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        return DummyAcquire(self.conn)


def _store(conn, whitelist, builder):
    return ContentStore(pool=DummyPool(conn), whitelist=whitelist, builder=builder)


OEUVRE_ROW = {
    "id_oeuvre": 7,
    "titre": json.dumps({"fr": "Nedjma", "ar": "نجمة"}),
    "description": json.dumps({"fr": "Roman", "ar": ""}),
    "resume": None,
    "prix": 900.0,
    "statut": "publie",
}


@pytest.mark.asyncio
async def test_list_entities_builds_parameterized_query(whitelist, builder):
    conn = DummyConnection(rows=[OEUVRE_ROW])
    store = _store(conn, whitelist, builder)

    items = await store.list_entities(
        "oeuvre",
        language="ar",
        search="nedj",
        search_fields=["titre"],
        sort_field="titre",
        direction="desc",
        limit=10,
        offset=20,
    )

    sql, args = conn.calls[0]
    assert sql == (
        'SELECT "oeuvre".* FROM "oeuvre" '
        "WHERE ("
        + " OR ".join(f"(\"oeuvre\".\"titre\" ->> ${i}) ILIKE ${i + 1} ESCAPE '\\'" for i in range(1, 11, 2))
        + ') ORDER BY ("oeuvre"."titre" ->> $11) DESC LIMIT $12 OFFSET $13'
    )
    assert args[-3:] == ("ar", 10, 20)
    assert items == [
        {
            "id_oeuvre": 7,
            "titre": "نجمة",
            "description": "Roman",
            "resume": None,
            "prix": 900.0,
            "statut": "publie",
        }
    ]


@pytest.mark.asyncio
async def test_list_entities_invalid_sort_field_orders_by_primary_key(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)

    await store.list_entities("oeuvre", sort_field="titre;DROP", limit=500)

    sql, args = conn.calls[0]
    assert sql == 'SELECT "oeuvre".* FROM "oeuvre" ORDER BY "oeuvre"."id_oeuvre" ASC LIMIT $1 OFFSET $2'
    assert args == (100, 0)


@pytest.mark.asyncio
async def test_list_entities_projection_and_full_text(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)

    await store.list_entities(
        "lieu", language="en", projections=["nom"], full_text="casbah", translate=False
    )

    sql, args = conn.calls[0]
    assert sql.startswith('SELECT "lieu".*, ("lieu"."nom" ->> $1) AS "nom_en" FROM "lieu" WHERE ')
    assert "plainto_tsquery('simple', $2)" in sql
    assert args[:2] == ("en", "casbah")


@pytest.mark.asyncio
async def test_list_entities_empty_search_is_unfiltered(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)

    await store.list_entities("services", search="   ")

    sql, _ = conn.calls[0]
    assert "WHERE" not in sql


@pytest.mark.asyncio
async def test_get_entity(whitelist, builder):
    conn = DummyConnection(row=OEUVRE_ROW)
    store = _store(conn, whitelist, builder)

    item = await store.get_entity("oeuvre", 7)

    assert conn.calls[0] == ('SELECT * FROM "oeuvre" WHERE "id_oeuvre" = $1', (7,))
    assert item["titre"] == {"fr": "Nedjma", "ar": "نجمة"}


@pytest.mark.asyncio
async def test_get_entity_missing(whitelist, builder):
    store = _store(DummyConnection(row=None), whitelist, builder)
    assert await store.get_entity("oeuvre", 404) is None


@pytest.mark.asyncio
async def test_update_entity_merges_and_writes_patch_only(whitelist, builder):
    returning = dict(OEUVRE_ROW, titre=json.dumps({"fr": "Nedjma", "ar": "نجمة", "en": "Nedjma"}), prix=1000.0)
    conn = DummyConnection(row=OEUVRE_ROW, returning=returning)
    store = _store(conn, whitelist, builder)

    result = await store.update_entity("oeuvre", 7, {"titre": {"en": "Nedjma"}, "prix": "1000"})

    assert conn.transactions == 1
    select_sql, _ = conn.calls[0]
    assert select_sql.endswith("FOR UPDATE")

    update_sql, args = conn.calls[1]
    assert update_sql == (
        'UPDATE "oeuvre" SET "titre" = $2::jsonb, "prix" = $3 WHERE "id_oeuvre" = $1 RETURNING *'
    )
    assert args[0] == 7
    assert json.loads(args[1]) == {"fr": "Nedjma", "ar": "نجمة", "en": "Nedjma"}
    assert args[2] == 1000.0
    assert result["titre"]["en"] == "Nedjma"


@pytest.mark.asyncio
async def test_update_entity_invalid_payload_never_touches_database(whitelist, builder):
    conn = DummyConnection(row=OEUVRE_ROW)
    store = _store(conn, whitelist, builder)

    with pytest.raises(ContentValidationError) as exc_info:
        await store.update_entity("oeuvre", 7, {"prix": -5, "titre": "Valide"})

    assert exc_info.value.errors[0]["field"] == "prix"
    assert conn.calls == []


@pytest.mark.asyncio
async def test_update_entity_not_found(whitelist, builder):
    conn = DummyConnection(row=None)
    store = _store(conn, whitelist, builder)

    with pytest.raises(EntityNotFoundError):
        await store.update_entity("oeuvre", 404, {"prix": 10})

    assert conn.rolled_back
    assert len(conn.calls) == 1


@pytest.mark.asyncio
async def test_update_entity_without_changes_returns_current(whitelist, builder):
    conn = DummyConnection(row=OEUVRE_ROW)
    store = _store(conn, whitelist, builder)

    result = await store.update_entity("oeuvre", 7, {"unknown": 1})

    assert len(conn.calls) == 1
    assert result["prix"] == 900.0


@pytest.mark.asyncio
async def test_create_entity(whitelist, builder):
    returning = {"id": 3, "nom": json.dumps({"fr": "", "ar": "فندق"}), "type_service": "hotel"}
    conn = DummyConnection(returning=returning)
    store = _store(conn, whitelist, builder)

    result = await store.create_entity("services", {"nom": {"ar": "فندق"}, "type_service": "hotel"})

    sql, args = conn.calls[0]
    assert sql.startswith('INSERT INTO "services" ("nom", "description", "adresse", "horaires", "type_service"')
    assert "$1::jsonb" in sql
    assert json.loads(args[0]) == {"fr": "", "ar": "فندق"}
    assert result["nom"] == {"fr": "", "ar": "فندق"}


@pytest.mark.asyncio
async def test_create_entity_missing_required(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)

    with pytest.raises(ContentValidationError):
        await store.create_entity("lieu", {"nom": "Casbah"})

    assert conn.calls == []


@pytest.mark.asyncio
async def test_store_requires_connection(whitelist, builder):
    store = ContentStore(whitelist=whitelist, builder=builder)
    with pytest.raises(DatabaseError):
        await store.get_entity("oeuvre", 1)


@pytest.mark.asyncio
async def test_list_entities_ignores_non_multilingual_fields(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)
    before = query_fallback_count("order", "invalid_field")

    await store.list_entities(
        "oeuvre",
        language="fr",
        search="x",
        search_fields=["prix", "titre"],
        sort_field="statut",
        direction="desc",
        projections=["mot_de_passe", "resume"],
        full_text="casbah",
        full_text_field="isbn",
    )

    sql, args = conn.calls[0]
    assert '"prix"' not in sql
    assert '"statut"' not in sql
    assert '"mot_de_passe"' not in sql
    assert "plainto_tsquery" not in sql
    assert sql.startswith('SELECT "oeuvre".*, ("oeuvre"."resume" ->> $1) AS "resume_fr" FROM "oeuvre" WHERE (')
    assert sql.endswith('ORDER BY "oeuvre"."id_oeuvre" DESC LIMIT $12 OFFSET $13')
    assert args[-2:] == (20, 0)
    assert query_fallback_count("order", "invalid_field") == before + 1


@pytest.mark.asyncio
async def test_list_entities_only_unknown_search_fields_is_unfiltered(whitelist, builder):
    conn = DummyConnection()
    store = _store(conn, whitelist, builder)

    await store.list_entities("lieu", search="alger", search_fields=["latitude"])

    sql, args = conn.calls[0]
    assert "WHERE" not in sql
    assert args == (20, 0)
