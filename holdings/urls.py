from django.urls import path

from holdings import views

app_name = "holdings"

urlpatterns = [
    path("view/", views.HoldingsView.as_view(), name="view"),
    path("allocation/", views.AllocationView.as_view(), name="allocation"),
]
