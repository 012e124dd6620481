from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .auth import get_user_from_request
from .routing import AUTHENTICATED, RouteNode, RouteTable
from .stores import UserStore, get_user_store

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

LOGIN_PATH = "/"

# view name -> template
VIEWS = {
    "Login": "login.html",
    "Home": "home.html",
    "DashboardBody": "dashboard_body.html",
    "AddProducts": "add_products.html",
    "ProductList": "product_list.html",
    "ProductDetail": "product_detail.html",
    "ProductUpdate": "product_update.html",
    "AdminProfile": "admin_profile.html",
}

route_table = RouteTable(
    [
        RouteNode(
            "/",
            view="Login",
            children=[RouteNode("/home", view="Home")],
        ),
        RouteNode(
            "/dashboard",
            shell="dashboard.html",
            requires=AUTHENTICATED,
            children=[
                RouteNode("/dashboard", view="DashboardBody"),
                RouteNode("/dashboard/addProducts", view="AddProducts"),
                RouteNode("/dashboard/products", view="ProductList"),
                RouteNode("/dashboard/products/details/:id", view="ProductDetail"),
                RouteNode("/dashboard/products/update/:id", view="ProductUpdate"),
                RouteNode("/dashboard/adminProfile", view="AdminProfile"),
            ],
        ),
    ],
    login_path=LOGIN_PATH,
)

router = APIRouter()


@router.get("/__routes", include_in_schema=False)
async def _list_routes():
    # debug endpoint: the page table as the gate sees it
    return {
        "routes": [
            {"path": path, "view": view, "gated": gated}
            for path, view, gated in route_table.paths()
        ]
    }


# Must be included after every API router: it claims all remaining GET paths
@router.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
async def render_page(path: str, request: Request, users: UserStore = Depends(get_user_store)):
    match = route_table.resolve("/" + path)
    if match is None:
        raise HTTPException(status_code=404, detail="Page not found")

    # checked on every navigation, never cached
    user = await get_user_from_request(request, users)
    redirect_to = route_table.authorize(match, user)
    if redirect_to is not None:
        return RedirectResponse(redirect_to, status_code=303)

    layout = match.shells[-1] if match.shells else "base.html"
    ctx = {"layout": layout, "view": match.view, "params": match.params, "user": user}
    return templates.TemplateResponse(request, VIEWS[match.view], ctx)
