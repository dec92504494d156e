from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nahw.routers import constructions, validation

app = FastAPI(title="Nahw Grammar Construction API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(constructions.router)
app.include_router(validation.router)


@app.get("/")
def root():
    return {"app": "nahw", "version": "0.1.0"}
