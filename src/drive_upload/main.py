from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .handler import HandlerResponse, UploadHandler
from .settings import settings

app = FastAPI(title="Drive JSON Upload")
handler = UploadHandler(settings)


def _to_response(result: HandlerResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(result.body, status_code=result.status_code, headers=result.headers)


@app.exception_handler(StarletteHTTPException)
async def _unrouted_method(request: Request, exc: StarletteHTTPException) -> Response:
    # methods outside the route's list never reach upload_to_drive
    if exc.status_code == 405 and request.url.path == settings.upload_route:
        return _to_response(handler.handle(request.method))
    return await http_exception_handler(request, exc)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.api_route(
    settings.upload_route,
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def upload_to_drive(request: Request) -> Response:
    body = await request.body()
    # Drive calls block
    result = await run_in_threadpool(handler.handle, request.method, body)
    return _to_response(result)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
