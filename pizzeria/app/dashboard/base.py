from fastapi import APIRouter, Depends

from pizzeria.app.dashboard.security import require_admin

# routers van submodules
from pizzeria.app.dashboard.orders_page import router as orders_router
from pizzeria.app.dashboard.settings_api import router as settings_router
from pizzeria.app.dashboard.reports_page import router as reports_router
from pizzeria.app.dashboard.monitoring_page import router as monitoring_router

router = APIRouter()


@router.get("/dashboard", dependencies=[Depends(require_admin)])
def dashboard_root():
    """Hoofd-dashboardpagina met knoppen."""
    return {
        "message": "Pizzeria dashboard actief",
        "routes": {
            "Pedidos": "/dashboard/orders",
            "Live instellingen": "/dashboard/api/settings",
            "Rapportage": "/dashboard/reports",
            "Monitoring": "/dashboard/monitoring",
        },
    }


# subrouters koppelen
router.include_router(orders_router)
router.include_router(settings_router)
router.include_router(reports_router)
router.include_router(monitoring_router)
