from django.urls import include, path

urlpatterns = [
    path("holdings/", include("holdings.urls")),
]
