"""
Registre central des routers.
- Auth: /jwt, /logout
- Catalogue: /plants, /plant/{id}, /add-plant
- Paiements: /create-payment-intent
- Commandes: /order
- Utilisateurs: /user
- Health: /health, /health/storage
"""
from fastapi import FastAPI
from plantnet.auth.views import router as auth_router
from plantnet.catalog.views import router as catalog_router
from plantnet.payments.views import router as payments_router
from plantnet.orders.views import router as orders_router
from plantnet.users.views import router as users_router
from plantnet.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(payments_router)
    app.include_router(orders_router)
    app.include_router(users_router)
    app.include_router(health_router)
