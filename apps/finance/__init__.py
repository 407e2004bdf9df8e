"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Finance app initialization. Owns the ledger (income and
             expense transactions), categories and the ledger gateway.
-------------------------------------------------------------------------
"""
