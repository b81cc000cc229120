from django.urls import path
from . import views

app_name = 'kds'

urlpatterns = [
    # Item transitions
    path('items/status/', views.update_item_status, name='update_item_status'),
    path('items/reset/', views.reset_items, name='reset_items'),

    # Screens
    path('queue/', views.kitchen_queue, name='kitchen_queue'),
    path('items/preparing/', views.preparing_items, name='preparing_items'),

    # Timers and screen settings
    path('timers/', views.kitchen_timers, name='kitchen_timers'),
    path('timers/<int:timer_id>/', views.delete_kitchen_timer, name='delete_kitchen_timer'),
    path('compile-settings/', views.compile_settings, name='compile_settings'),
]
