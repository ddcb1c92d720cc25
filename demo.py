#!/usr/bin/env python3
"""
Demo script for the SQL log extraction tools.
"""

import tempfile
from pathlib import Path

from logsql import LogScanner, QueryProcessor
from logsql.io_utils import JSONLWriter, JSONLReader


def create_sample_log():
    """Create a sample data-access log in Shift_JIS."""
    return "\n".join([
        "2024/06/01 09:15:00,INFO,受注サービス,開始 id=5f3a9c sql=SELECT * FROM orders WHERE customer_id = ? AND status = ?",
        "2024/06/01 09:15:00,DEBUG,受注サービス,id=5f3a9c params=[Long:1:1001][String:2:OPEN]",
        "2024/06/01 09:15:01,INFO,受注サービス,Daoの終了jp.co.example.order.OrderSearchDao,12ms",
        "2024/06/01 09:15:05,DEBUG,受注サービス,id=5f3a9c params=[Long:1:1002][String:2:CLOSED]",
        "2024/06/01 09:16:10,INFO,顧客サービス,開始 id=7b21e0 sql=UPDATE customers SET name = ?, vip = ? WHERE id = ?",
        "2024/06/01 09:16:10,DEBUG,顧客サービス,id=7b21e0 params=[String:1:O'Neil][Boolean:2:true][Int:3:1001]",
        "2024/06/01 09:16:11,INFO,顧客サービス,Daoの終了jp.co.example.customer.CustomerUpdateDao,4ms",
        "",
    ])


def main():
    """Run the demo."""
    print("🚀 SQL Log Extraction Demo")
    print("=" * 50)
    
    # Create temporary directory
    temp_dir = tempfile.mkdtemp()
    print(f"📁 Working in temporary directory: {temp_dir}")
    
    try:
        # Step 1: Write sample log
        log_file = Path(temp_dir) / "stcApp.log"
        log_file.write_bytes(create_sample_log().encode("shift_jis"))
        print(f"📝 Created sample log file: {log_file.name}")
        
        scanner = LogScanner(encoding="shift_jis")
        processor = QueryProcessor(scanner=scanner)
        
        # Step 2: List ids
        print("\n📋 Transaction ids with SQL:")
        for info in scanner.list_ids(str(log_file)):
            print(f"  • {info.id} ({info.params_count} parameter set(s))")
        
        # Step 3: Resolve one id
        print("\n🔍 Resolving id 5f3a9c...")
        result = processor.process_query("5f3a9c", str(log_file))
        for group in result.groups:
            print(f"\n  Template:\n{group.formatted_template_sql}")
            for execution in group.executions:
                print(f"\n  #{execution.execution_index} {execution.timestamp} [{execution.dao}]")
                print(f"  {execution.filled_sql}")
        
        # Step 4: Most recent query
        print("\n⏱️  Most recent query:")
        last = processor.process_last_query(str(log_file))
        print(f"  {last.filled_sql}")
        print(last.formatted_params)
        
        # Step 5: Export executions
        export_file = Path(temp_dir) / "executions.jsonl"
        with JSONLWriter(str(export_file)) as writer:
            writer.write_executions(result.executions)
        reloaded = JSONLReader(str(export_file)).read_executions()
        print(f"💾 Exported and reloaded {len(reloaded)} execution(s) from {export_file.name}")
        
        print(f"\n🎉 Demo completed successfully!")
        
    except Exception as e:
        print(f"\n❌ Demo failed with error: {e}")
        import traceback
        traceback.print_exc()
    
    finally:
        # Cleanup
        import shutil
        shutil.rmtree(temp_dir, ignore_errors=True)
        print(f"\n🧹 Cleaned up temporary directory")


if __name__ == '__main__':
    main()
