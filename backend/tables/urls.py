from django.urls import path

from .views import MergeOrderView, MoveOrderView, TableListView

app_name = "tables"

urlpatterns = [
    path("", TableListView.as_view(), name="table-list"),
    path("orders/<int:order_id>/move/", MoveOrderView.as_view(), name="move-order"),
    path("orders/<int:order_id>/merge/", MergeOrderView.as_view(), name="merge-order"),
]
