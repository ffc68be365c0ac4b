from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from typing import List
import uvicorn
import logging

from slowapi.errors import RateLimitExceeded
from core import table_ops
from core.lifespan import lifespan
from core.repository import WalTableStore
from core.interchange import TableImportExportService
from core.downloads import ResponseDownload
from core.errors import (
    ExcelUnsupportedError,
    FileReadError,
    StoreError,
    TableNotFoundError,
    UnsupportedFormatError,
)
from core.constants.main_values import LOG_FILE, RATE_LIMIT
from starlette.middleware.cors import CORSMiddleware
from models.api import CreateColumnRequest, UpdateCellRequest, TableSummary
from models.structure.table import ImportResult, TableData
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

app = FastAPI(
    title="SheetVault",
    description="Dynamic tables with CSV/JSON import and export",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    expose_headers=["Content-Disposition"],
)

Instrumentator().instrument(app).expose(app)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOG_FILE),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("sheetvault")

table_store = WalTableStore()
interchange = TableImportExportService(table_store)


@app.get("/ping")
async def root():
    return {"status": "alive"}


@app.get("/table/list", response_model=List[TableSummary])
async def list_tables_endpoint():
    return await table_store.list_tables()


@app.get("/table/{table_id}", response_model=TableData)
async def get_table_endpoint(table_id: str, name: str | None = None):
    try:
        return await table_store.load(table_id)
    except TableNotFoundError:
        logger.info(f"Table {table_id} not found, creating default")

    try:
        return await table_store.create_default(table_id, name=name)
    except ValueError:
        # created concurrently
        return await table_store.load(table_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/table/{table_id}")
async def delete_table_endpoint(table_id: str):
    try:
        await table_store.delete(table_id)
        return {"status": "success", "message": f"Table '{table_id}' deleted"}
    except TableNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.error(f"Error deleting table: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/table/{table_id}/columns", response_model=TableData)
@limiter.limit(RATE_LIMIT)
async def add_column_endpoint(request: Request, table_id: str, payload: CreateColumnRequest):
    try:
        table = await table_store.load(table_id)
        return await table_store.save(table_id, table_ops.add_column(table, payload.name, payload.type))
    except TableNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/table/{table_id}/columns/{column_id}", response_model=TableData)
@limiter.limit(RATE_LIMIT)
async def delete_column_endpoint(request: Request, table_id: str, column_id: str):
    try:
        table = await table_store.load(table_id)
        updated = table_ops.delete_column(table, column_id)
        if updated is table:
            return table
        return await table_store.save(table_id, updated)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/table/{table_id}/rows", response_model=TableData)
@limiter.limit(RATE_LIMIT)
async def add_row_endpoint(request: Request, table_id: str):
    try:
        table = await table_store.load(table_id)
        return await table_store.save(table_id, table_ops.add_row(table))
    except TableNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/table/{table_id}/rows/{row_id}", response_model=TableData)
@limiter.limit(RATE_LIMIT)
async def delete_row_endpoint(request: Request, table_id: str, row_id: str):
    try:
        table = await table_store.load(table_id)
        return await table_store.save(table_id, table_ops.delete_row(table, row_id))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/table/{table_id}/rows/{row_id}/cells/{column_id}", response_model=TableData)
@limiter.limit(RATE_LIMIT)
async def update_cell_endpoint(request: Request, table_id: str, row_id: str, column_id: str,
                               payload: UpdateCellRequest):
    try:
        table = await table_store.load(table_id)
        updated = table_ops.update_cell(table, row_id, column_id, payload.value)
        return await table_store.save(table_id, updated)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/table/{table_id}/export")
@limiter.limit(RATE_LIMIT)
async def export_table_endpoint(request: Request, table_id: str, format: str = "csv",
                                table_name: str | None = None):
    download = ResponseDownload()
    try:
        await interchange.export_table(table_id, format, download, table_name=table_name)
    except TableNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return download.response


@app.post("/table/{table_id}/import", response_model=ImportResult)
@limiter.limit(RATE_LIMIT)
async def import_table_endpoint(request: Request, table_id: str, file: UploadFile = File(...)):
    try:
        result = await interchange.import_file(file, table_id)
        logger.info(f"Table imported: {table_id} ({result.imported} rows)")
        return result
    except ExcelUnsupportedError as e:
        raise HTTPException(status_code=501, detail=str(e))
    except (ValueError, FileReadError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error(f"Import of {table_id} could not be saved: {e}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    print("--- Starting SheetVault on http://0.0.0.0:8000 ---")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        workers=1,
        reload=False,
        limit_concurrency=100,
    )
