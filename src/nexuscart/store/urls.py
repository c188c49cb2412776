"""Store URL patterns."""

from django.urls import path

from . import views

app_name = "store"

urlpatterns = [
    # Catalog
    path("products/", views.ProductListView.as_view(), name="product-list"),
    path("products/<str:product_id>/", views.ProductDetailView.as_view(), name="product-detail"),

    # Cart
    path("cart/", views.CartView.as_view(), name="cart"),
    path("cart/add/", views.CartAddView.as_view(), name="cart-add"),
    path("cart/quantity/", views.CartQuantityView.as_view(), name="cart-quantity"),
    path("cart/remove/", views.CartRemoveView.as_view(), name="cart-remove"),
    path("cart/clear/", views.CartClearView.as_view(), name="cart-clear"),

    # Checkout and order history
    path("checkout/", views.CheckoutView.as_view(), name="checkout"),
    path("orders/", views.OrderHistoryView.as_view(), name="order-list"),

    # Administration
    path("manage/", views.ManageDashboardView.as_view(), name="manage-dashboard"),
    path("manage/products/", views.ManageProductListView.as_view(), name="manage-product-list"),
    path(
        "manage/products/<str:product_id>/",
        views.ManageProductDetailView.as_view(),
        name="manage-product-detail",
    ),
    path(
        "manage/products/<str:product_id>/delete/",
        views.ManageProductDeleteView.as_view(),
        name="manage-product-delete",
    ),
    path("manage/orders/", views.ManageOrderListView.as_view(), name="manage-order-list"),
    path(
        "manage/orders/<uuid:order_id>/status/",
        views.ManageOrderStatusView.as_view(),
        name="manage-order-status",
    ),
]
