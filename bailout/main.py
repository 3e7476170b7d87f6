import uvicorn
from fastapi import FastAPI
from bailout.api.routes import router
from bailout.db.session import init_db


app = FastAPI(title="Bailout API", version="0.1.0")
app.include_router(router, prefix="/v1")

@app.on_event("startup")
async def on_startup():
    await init_db()


def run():
    # `bailout-api`, or: uvicorn bailout.main:app
    uvicorn.run("bailout.main:app", host="0.0.0.0", port=8000)
