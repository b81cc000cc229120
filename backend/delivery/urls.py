from django.urls import path

from .views import ClaimOrderView, DriverLocationView, DriverReportView, DriverStatusView

app_name = "delivery"

urlpatterns = [
    path("orders/<int:order_id>/claim/", ClaimOrderView.as_view(), name="claim-order"),
    path("orders/<int:order_id>/driver-status/", DriverStatusView.as_view(), name="driver-status"),
    path("drivers/<int:driver_id>/location/", DriverLocationView.as_view(), name="driver-location"),
    path("drivers/<int:driver_id>/report/", DriverReportView.as_view(), name="driver-report"),
]
