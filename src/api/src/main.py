from fastapi import FastAPI, HTTPException
from origin_guard import InvalidOrigin
from request_forward import check_traffic_advice
from config import HOST, PORT, LOG_LEVEL
import logging

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Traffic Advice Checkup")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/fetch")
async def fetch_traffic_advice(origin: str):
    # Unreachable origins and bad bodies still come back as 200; the page
    # wants to show what went wrong, not a generic failure.
    try:
        return await check_traffic_advice(origin)
    except InvalidOrigin as error:
        logger.info("Rejected origin %r: %s", origin, error)
        raise HTTPException(status_code=400, detail=str(error))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
