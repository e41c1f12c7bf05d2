"""
Reporting API URLs
"""

from django.urls import path
from . import views

urlpatterns = [
    path('statistics/', views.statistics, name='statistics'),
    path('dormitories/', views.dormitory_statistics, name='dormitory-statistics'),
]
