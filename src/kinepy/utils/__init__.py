from .report import fk_result_table, ik_result_table, print_result

__all__ = ["fk_result_table", "ik_result_table", "print_result"]
