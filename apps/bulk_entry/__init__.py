"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Bulk financial entry engine: import parsing, counterparty
             resolution, running totals and atomic batch commit.
-------------------------------------------------------------------------
"""
