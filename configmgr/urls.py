from django.urls import path

from .views import AdminEmailDetailView, AdminEmailsView, SiteSettingView

urlpatterns = [
    path("admins/", AdminEmailsView.as_view()),
    path("admins/<str:email>/", AdminEmailDetailView.as_view()),
    path("settings/<str:key>/", SiteSettingView.as_view()),
]
