"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Core app initialization. Contains tenants, shared mixins,
             money formatting and exceptions.
-------------------------------------------------------------------------
"""
