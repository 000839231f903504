from drive_upload.token_tool import main

if __name__ == "__main__":
    raise SystemExit(main())
