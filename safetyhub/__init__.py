"""SafetyHub 점검 라이프사이클 서비스.

SafetyHub inspection lifecycle service: checklists, inspections,
corrective actions, notifications and reports.
"""
