"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Bulk Entry URL Configuration
-------------------------------------------------------------------------
"""
from django.urls import path
from . import views

app_name = 'bulk_entry'

urlpatterns = [
    # Entry grid
    path('import/', views.BulkImportView.as_view(), name='import'),
    path('preview/', views.BulkPreviewView.as_view(), name='preview'),
    path('submit/', views.BulkSubmitView.as_view(), name='submit'),

    # Budget usage
    path('budgets/', views.BudgetUsageListView.as_view(), name='budget_usage_list'),
    path('budgets/<int:pk>/', views.BudgetUsageDetailView.as_view(), name='budget_usage_detail'),

    # Ledger totals
    path('totals/', views.PeriodTotalsView.as_view(), name='period_totals'),
]
