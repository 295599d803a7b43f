from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Application settings
    app_name: str = "Luxe Storefront API"

    # Firestore settings
    firestore_project_id: str = "luxe-collective"
    quota_project_id: str = "luxe-collective"
    firestore_collection_users: str = "users"
    firestore_collection_products: str = "products"
    firestore_collection_orders: str = "orders"

    # Firebase Auth settings (audience for ID token verification)
    firebase_project_id: str = "luxe-collective"

    # Read-modify-write attempts for the address update before giving up
    address_update_max_attempts: int = 3

    # Logging settings
    log_level: str = "INFO"

    class Config:
        env_file = ".env" # If you want to use an.env file for configuration
        env_file_encoding = 'utf-8'

settings = Settings()
