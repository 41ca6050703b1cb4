#!/usr/bin/env python3
"""
Feed Resource Management CLI

사용법:
    python -m backend.cli.main init-db
    python -m backend.cli.main add-category --user 1 "Tech"
    python -m backend.cli.main list-feeds --user 1
    python -m backend.cli.main refresh-feed --user 1 --feed 42
"""
import logging

import typer
from rich.console import Console
from rich.table import Table

from backend.core.config import LOG_LEVEL
from backend.core.container import Container
from backend.core.database import MongoManager
from backend.core.exceptions import FeedAPIException

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = typer.Typer(help="Feed Resource Management CLI")
console = Console()


@app.callback()
def callback():
    """Feed Resource Manager CLI"""
    pass


@app.command("init-db")
def init_db():
    """MongoDB 인덱스 생성 및 초기화"""
    console.print("[bold blue]MongoDB 인덱스 초기화 시작...[/bold blue]")

    if not MongoManager.ping():
        console.print("[bold red]✗ MongoDB 연결 실패[/bold red]")
        raise typer.Exit(code=1)
    console.print("[green]✓[/green] MongoDB 연결 성공")

    try:

        repos = [
            ("feeds", Container.get_feed_repository()),
            ("entries", Container.get_entry_repository()),
            ("categories", Container.get_category_repository()),
        ]
        for name, repo in repos:
            console.print(f"[yellow]{name} 컬렉션 인덱스 생성 중...[/yellow]")
            repo.create_indexes()
            console.print(f"[green]✓[/green] {name} 컬렉션 인덱스 생성 완료")

        console.print("[bold green]✓ 모든 인덱스 초기화 완료[/bold green]")

    except Exception as e:
        console.print(f"[bold red]✗ 인덱스 초기화 실패: {str(e)}[/bold red]")
        raise typer.Exit(code=1)


@app.command("add-category")
def add_category(
    title: str = typer.Argument(..., help="카테고리 제목"),
    user_id: int = typer.Option(..., "--user", "-u", help="사용자 ID"),
):
    """카테고리 추가"""
    try:
        category = Container.get_category_repository().create_category(user_id, title)
        console.print(f"[green]✓[/green] 카테고리 추가: id={category.id} title={category.title}")
    except FeedAPIException as e:
        console.print(f"[bold red]✗ 카테고리 추가 실패: {str(e)}[/bold red]")
        raise typer.Exit(code=1)


@app.command("list-feeds")
def list_feeds(user_id: int = typer.Option(..., "--user", "-u", help="사용자 ID")):
    """사용자 피드 목록"""
    try:
        feeds = Container.get_feed_repository().get_feeds(user_id)
    except FeedAPIException as e:
        console.print(f"[bold red]✗ 피드 조회 실패: {str(e)}[/bold red]")
        raise typer.Exit(code=1)

    table = Table(title=f"피드 목록 (user={user_id})")
    table.add_column("ID", style="cyan")
    table.add_column("제목", style="green")
    table.add_column("URL")
    table.add_column("카테고리")
    table.add_column("오류", style="red")

    for f in feeds:
        table.add_row(
            str(f.id),
            f.title or "",
            f.feed_url,
            (f.category.title or str(f.category.id)) if f.category else "",
            str(f.parsing_error_count) if f.parsing_error_count else "",
        )
    console.print(table)


@app.command("refresh-feed")
def refresh_feed(
    user_id: int = typer.Option(..., "--user", "-u", help="사용자 ID"),
    feed_id: int = typer.Option(..., "--feed", "-f", help="피드 ID"),
):
    """피드 즉시 갱신"""
    console.print(f"[bold blue]피드 갱신 중 (id={feed_id})...[/bold blue]")
    try:
        Container.get_feed_handler().refresh_feed(user_id, feed_id)
        console.print("[bold green]✓ 피드 갱신 완료[/bold green]")
    except FeedAPIException as e:
        console.print(f"[bold red]✗ 피드 갱신 실패: {str(e)}[/bold red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
