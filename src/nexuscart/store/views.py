"""Store API views backing the storefront SPA.

Public:
- GET  /shop/products/
- GET  /shop/products/<id>/

Signed-in (user or admin):
- GET  /shop/cart/
- POST /shop/cart/add/ | quantity/ | remove/ | clear/
- GET  /shop/checkout/  (preview)
- POST /shop/checkout/  (place order)
- GET  /shop/orders/

Admin:
- GET  /shop/manage/
- GET  /shop/manage/products/ , POST to create
- POST /shop/manage/products/<id>/ , POST .../delete/
- GET  /shop/manage/orders/
- POST /shop/manage/orders/<id>/status/
"""

import logging

from django.db.models import Count
from django.http import JsonResponse
from django.views import View

from nexuscart.core.exceptions import NotFoundError, StoreError, ValidationError
from nexuscart.core.http import error_response, json_body
from nexuscart.core.mixins import AdminRequiredMixin, CustomerRequiredMixin

from .aggregation import cart_count, cart_total, resolved_lines
from .catalog import delete_product, get_product, list_products, save_product
from .forms import ProductForm
from .middleware import get_store_session
from .models import Order, OrderStatus, Product
from .orders import order_total, place_order, update_order_status
from .serializers import cart_line_to_dict, order_to_dict, product_to_dict

logger = logging.getLogger(__name__)


class StoreApiView(View):
    """Base view answering store errors with a JSON message."""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except StoreError as e:
            return error_response(e)


def cart_payload(session):
    """Cart as the storefront shows it: resolvable lines plus derived totals."""
    store = session.cart
    items = store.items
    lines = resolved_lines(items, session.products)
    return {
        "items": [cart_line_to_dict(line) for line in lines],
        "count": cart_count(items),
        "total": f"{cart_total(items, session.products):.2f}",
        "version": store.version,
    }


def _product_id(data):
    product_id = str(data.get("product_id") or "").strip()
    if not product_id:
        raise ValidationError("product_id required")
    return product_id


# =============================================================================
# Catalog
# =============================================================================


class ProductListView(StoreApiView):
    def get(self, request):
        products = list_products(
            category=request.GET.get("category") or None,
            query=request.GET.get("q") or None,
        )
        return JsonResponse({"products": [product_to_dict(p) for p in products]})


class ProductDetailView(StoreApiView):
    def get(self, request, product_id):
        return JsonResponse({"product": product_to_dict(get_product(product_id))})


# =============================================================================
# Cart
# =============================================================================


class CartView(CustomerRequiredMixin, StoreApiView):
    def get(self, request):
        return JsonResponse(cart_payload(get_store_session(request)))


class CartAddView(CustomerRequiredMixin, StoreApiView):
    def post(self, request):
        product = get_product(_product_id(json_body(request)))
        session = get_store_session(request)
        session.cart.add(str(product.pk))
        return JsonResponse(cart_payload(session))


class CartQuantityView(CustomerRequiredMixin, StoreApiView):
    def post(self, request):
        data = json_body(request)
        product_id = _product_id(data)
        if "quantity" not in data:
            raise ValidationError("quantity required")
        session = get_store_session(request)
        session.cart.set_quantity(product_id, data["quantity"])
        return JsonResponse(cart_payload(session))


class CartRemoveView(CustomerRequiredMixin, StoreApiView):
    def post(self, request):
        product_id = _product_id(json_body(request))
        session = get_store_session(request)
        session.cart.remove(product_id)
        return JsonResponse(cart_payload(session))


class CartClearView(CustomerRequiredMixin, StoreApiView):
    def post(self, request):
        session = get_store_session(request)
        session.cart.clear()
        return JsonResponse(cart_payload(session))


# =============================================================================
# Checkout and order history
# =============================================================================


class CheckoutView(CustomerRequiredMixin, StoreApiView):
    """GET previews the order; POST places it."""

    def get(self, request):
        session = get_store_session(request)
        lines = resolved_lines(session.cart.items, session.products)
        return JsonResponse({
            "items": [cart_line_to_dict(line) for line in lines],
            "total_amount": f"{order_total(lines):.2f}",
        })

    def post(self, request):
        data = json_body(request)
        idempotency_key = str(data.get("idempotency_key") or "").strip() or None
        if idempotency_key and len(idempotency_key) > 64:
            raise ValidationError("idempotency_key must be at most 64 characters")

        session = get_store_session(request)
        order = place_order(
            request.user,
            session.cart,
            session.products,
            idempotency_key=idempotency_key,
        )
        return JsonResponse({"order": order_to_dict(order)}, status=201)


class OrderHistoryView(CustomerRequiredMixin, StoreApiView):
    def get(self, request):
        orders = (
            Order.objects.filter(user=request.user)
            .prefetch_related("items")
            .order_by("-created_at")
        )
        return JsonResponse({"orders": [order_to_dict(o) for o in orders]})


# =============================================================================
# Store administration
# =============================================================================


class ManageDashboardView(AdminRequiredMixin, StoreApiView):
    def get(self, request):
        by_status = dict(
            Order.objects.values_list("status").annotate(count=Count("pk")).order_by()
        )
        return JsonResponse({
            "product_count": Product.objects.count(),
            "order_count": sum(by_status.values()),
            "orders_by_status": {status: by_status.get(status, 0) for status in OrderStatus.values},
        })


def _form_errors(form):
    return JsonResponse(
        {"errors": {field: list(errors) for field, errors in form.errors.items()}},
        status=400,
    )


class ManageProductListView(AdminRequiredMixin, StoreApiView):
    def get(self, request):
        return JsonResponse({"products": [product_to_dict(p) for p in list_products()]})

    def post(self, request):
        form = ProductForm(request.POST)
        if not form.is_valid():
            return _form_errors(form)
        product = save_product(form, image=request.FILES.get("image"), actor=request.user)
        return JsonResponse({"product": product_to_dict(product)}, status=201)


class ManageProductDetailView(AdminRequiredMixin, StoreApiView):
    def get(self, request, product_id):
        return JsonResponse({"product": product_to_dict(get_product(product_id))})

    def post(self, request, product_id):
        product = get_product(product_id)
        form = ProductForm(request.POST, instance=product)
        if not form.is_valid():
            return _form_errors(form)
        product = save_product(form, image=request.FILES.get("image"), actor=request.user)
        return JsonResponse({"product": product_to_dict(product)})


class ManageProductDeleteView(AdminRequiredMixin, StoreApiView):
    def post(self, request, product_id):
        delete_product(get_product(product_id), actor=request.user)
        return JsonResponse({"status": "deleted", "product_id": product_id})


class ManageOrderListView(AdminRequiredMixin, StoreApiView):
    def get(self, request):
        orders = Order.objects.prefetch_related("items").order_by("-created_at")
        status = request.GET.get("status")
        if status:
            orders = orders.filter(status=status)
        return JsonResponse({"orders": [order_to_dict(o) for o in orders]})


class ManageOrderStatusView(AdminRequiredMixin, StoreApiView):
    def post(self, request, order_id):
        try:
            order = Order.objects.get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFoundError("Order not found")

        new_status = str(json_body(request).get("status") or "").strip()
        order = update_order_status(order, new_status, request.user)
        return JsonResponse({"order": order_to_dict(order)})
