from django.urls import path

from .views import CloseRegisterView, OpenRegisterView, RegisterStatusView

app_name = "registers"

urlpatterns = [
    path("status/", RegisterStatusView.as_view(), name="status"),
    path("open/", OpenRegisterView.as_view(), name="open"),
    path("close/", CloseRegisterView.as_view(), name="close"),
]
