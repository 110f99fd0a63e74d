from django.urls import path
from . import views

app_name = 'crud'

urlpatterns = [
    path('<slug:table_key>/', views.list_view, name='list'),
    path('<slug:table_key>/nieuw/', views.create_view, name='create'),
    path('<slug:table_key>/<str:row_id>/', views.detail_view, name='detail'),
    path('<slug:table_key>/<str:row_id>/bewerken/', views.edit_view, name='edit'),
    path('<slug:table_key>/<str:row_id>/verwijderen/', views.delete_view, name='delete'),
]
