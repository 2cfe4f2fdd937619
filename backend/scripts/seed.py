"""Seed script: loads demo assets for one tenant through the CSV import pipeline.

Runs the same parse -> validate -> insert path as the upload endpoint, so the
printed result shows exactly what a user would see. Re-running reports the
already-present codes as per-row errors.
Run: python scripts/seed.py [owner-uuid]
"""
import asyncio
import os
import sys
import uuid

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from assetbridge.core.config import settings
from assetbridge.services.asset_import import import_assets
from assetbridge.services.asset_store import SqlAlchemyAssetStore
from assetbridge.services.csv_source import parse_csv

DEMO_OWNER_ID = uuid.UUID("7d3f5c1e-2a4b-4c6d-8e9f-0a1b2c3d4e5f")

# Portuguese headers on purpose: exercises the header vocabulary.
DEMO_CSV = """nome;código;localização;unidade;status;data de aquisição;valor;número de série;fabricante;modelo;inalienável;observações
Notebook Dell;NB001;Sala 101;Matriz;ativo;15/01/2023;2.500,00;SN123456;Dell;Inspiron 15;não;Notebook para desenvolvimento
Monitor Samsung;MON001;Sala 102;Matriz;ativo;10/02/2023;800,00;MON789;Samsung;24 polegadas;não;Monitor secundário
Impressora HP;IMP001;Sala 103;Filial;manutenção;2022-11-03;1.200,50;HP555;HP;LaserJet;sim;
Cadeira;CAD001;Almoxarifado;Filial;baixado;;;;;;não;Aguardando descarte
"""


async def seed(owner_id: uuid.UUID) -> None:
    engine = create_async_engine(settings.DATABASE_URL)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

    rows = parse_csv(DEMO_CSV.encode("utf-8"))
    async with SessionLocal() as db:
        result = await import_assets(rows, owner_id, SqlAlchemyAssetStore(db))

    print(f"  imported {result.success_count} of {len(rows)} assets for owner {owner_id}")
    for issue in result.errors:
        print(f"  [row {issue.row_number}] {issue.message}")

    await engine.dispose()


if __name__ == "__main__":
    owner = uuid.UUID(sys.argv[1]) if len(sys.argv) > 1 else DEMO_OWNER_ID
    asyncio.run(seed(owner))
