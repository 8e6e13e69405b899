from notion_blog_sync.cli import app

app(prog_name="notion-blog-sync")
