"""GOD X fitness tracker core."""
