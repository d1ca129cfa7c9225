from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from export_lens.routers import exports

app = FastAPI(
    title="Export Lens Server",
    description="API for locating and rewriting named exports in JS/TS modules.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(exports.router)

@app.get("/api-status")
async def root():
    return {"message": "Export Lens Server is running. Visit /docs for API documentation."}
