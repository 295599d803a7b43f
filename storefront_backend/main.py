import uvicorn

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from config import DatabaseClients, get_logger, settings
from router import account_router, order_router, product_router, wishlist_router

# Configure logging with structured logger
logger = get_logger("main")

# Service configuration
SERVICE_TITLE = settings.app_name
SERVICE_PATH = "store"
API_VERSION = "v1"

# Main application instance
app = FastAPI(title=f"{SERVICE_TITLE} - Main Gateway")

# Sub-API for actual storefront operations
api_v1 = FastAPI(
    title=SERVICE_TITLE,
    description="API for the storefront catalog, user profiles, shipping addresses, orders and wishlists.",
    version=API_VERSION,
)

@app.on_event("startup")
async def startup_db_client():
    """Open the database clients and hand them to the sub-API"""
    logger.info("Opening database clients...")
    clients = DatabaseClients()
    try:
        clients.open()
        logger.info("Database clients ready")
    except Exception as e:
        logger.warning(f"Failed to establish database connection: {e}")
    api_v1.state.clients = clients

@app.on_event("shutdown")
async def shutdown_db_client():
    """Close database clients on shutdown"""
    logger.info("Closing database clients...")
    clients = getattr(api_v1.state, "clients", None)
    if clients is not None:
        await clients.close()
    logger.info("Database clients closed")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/", response_class=HTMLResponse)
@app.get(f"/{SERVICE_PATH}", response_class=HTMLResponse)
@app.get(f"/{SERVICE_PATH}/", response_class=HTMLResponse)
async def hello_service():
    logger.info(f"Root or service path /{SERVICE_PATH} accessed.")
    return f"""
    <html>
        <head>
            <title>{SERVICE_TITLE}</title>
        </head>
        <body>
            <h1>You've reached the {SERVICE_TITLE}.</h1>
            <p>See <a href='/{SERVICE_PATH}/api/{API_VERSION}/docs'>API docs</a> for storefront operations.</p>
        </body>
    </html>
    """

# Include routers
api_v1.include_router(account_router.router)
logger.info("Profile router included in the sub-API.")

api_v1.include_router(product_router.router)
logger.info("Product router included in the sub-API.")

api_v1.include_router(order_router.router)
logger.info("Order router included in the sub-API.")

api_v1.include_router(wishlist_router.router)
logger.info("Wishlist router included in the sub-API.")

# Mount the sub-API (api_v1) under the main app (app)
app.mount(f"/{SERVICE_PATH}/api/{API_VERSION}", api_v1)
logger.info(f"Sub-API mounted at /{SERVICE_PATH}/api/{API_VERSION}")

if __name__ == "__main__":
    port = 8083
    host = "0.0.0.0"  # Listen on all available IPs

    logger.info(f"Starting Uvicorn server on {host}:{port}")
    uvicorn.run("main:app", host=host, port=port, log_level="info", reload=True)
